"""
graphql_dsl - build GraphQL queries with Python syntax.

Queries, mutations and fragments are composed with nested ``with`` blocks,
rendered into GraphQL document text, sent over HTTP and read back through
attribute access on the response data.
"""

from .client import ExecutionResult, GraphQLClient
from .config import ClientConfig, LoggingConfig, LogLevel
from .dsl import (
    EnumValue,
    Fragment,
    Node,
    NodeKind,
    Operation,
    OperationType,
    Variable,
    fragment,
    mutation,
    query,
)
from .exceptions import (
    DanglingFragmentReference,
    DecodeError,
    DuplicateFragmentName,
    GraphQLDSLError,
    GraphQLExecutionError,
    HTTPStatusError,
    MalformedQuery,
    MissingField,
    ProtocolViolation,
    SerializationError,
    TransportConnectionError,
    TransportError,
    TransportTimeoutError,
)
from .response import ResponseList, ResponseObject, ResponseScalar, ResponseValue, wrap
from .serializer import DocumentSerializer, serialize
from .transport import AiohttpTransport, Transport, TransportResponse

__version__ = "1.0.0"

__all__ = [
    # DSL
    "query",
    "mutation",
    "fragment",
    "Operation",
    "OperationType",
    "Fragment",
    "Node",
    "NodeKind",
    "EnumValue",
    "Variable",
    # Serializer
    "DocumentSerializer",
    "serialize",
    # Response adapter
    "wrap",
    "ResponseValue",
    "ResponseScalar",
    "ResponseList",
    "ResponseObject",
    # Client and transport
    "GraphQLClient",
    "ExecutionResult",
    "Transport",
    "TransportResponse",
    "AiohttpTransport",
    # Configuration
    "ClientConfig",
    "LoggingConfig",
    "LogLevel",
    # Exceptions
    "GraphQLDSLError",
    "MalformedQuery",
    "SerializationError",
    "DanglingFragmentReference",
    "DuplicateFragmentName",
    "TransportError",
    "TransportTimeoutError",
    "TransportConnectionError",
    "HTTPStatusError",
    "DecodeError",
    "ProtocolViolation",
    "GraphQLExecutionError",
    "MissingField",
]
