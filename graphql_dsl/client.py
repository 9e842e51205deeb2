"""
GraphQL client.

Serializes a built operation, posts it through a transport, decodes the
response envelope and wraps its data for attribute access.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from .config import ClientConfig
from .dsl.definitions import Fragment, Operation
from .exceptions import (
    DecodeError,
    GraphQLExecutionError,
    ProtocolViolation,
    TransportErrorHandler,
)
from .response import ResponseValue, wrap
from .serializer import DocumentSerializer
from .transport import AiohttpTransport, Transport, TransportResponse

logger = logging.getLogger(__name__)

Executable = Union[Operation, Fragment, str]
Decoder = Callable[[bytes], Any]


def _operation_name(operation: Executable) -> Optional[str]:
    if isinstance(operation, Operation):
        return operation.name
    return None


@dataclass(frozen=True)
class ExecutionResult:
    """
    Result of one ``execute`` call.

    Attributes:
        operation: The executed definition (or document text)
        query: Serialized document that was sent
        data: Wrapped ``data`` portion of the response
        errors: Raw ``errors`` entries reported alongside the data
        extensions: Raw ``extensions`` object, if any
        status_code: HTTP status code
        error: GraphQLExecutionError for the reported errors, or None
    """

    operation: Executable
    query: str
    data: Optional[ResponseValue]
    errors: Tuple[Dict[str, Any], ...] = ()
    extensions: Optional[Dict[str, Any]] = None
    status_code: int = 200
    error: Optional[GraphQLExecutionError] = field(default=None, compare=False, repr=False)

    @property
    def has_errors(self) -> bool:
        """Check if the server reported errors."""
        return len(self.errors) > 0

    def raise_for_errors(self) -> None:
        """Raise GraphQLExecutionError if the server reported errors."""
        if self.error is not None:
            raise self.error


class GraphQLClient:
    """
    Client executing operations built with the query DSL.

    Examples:
        Blocking call:
        ```python
        client = GraphQLClient("https://api.example.com/graphql")

        with query() as q:
            with q.catCollection(limit=1):
                with q.items:
                    q.fields("name", "likes")

        result = client.execute(q.build())
        for cat in result.data.catCollection.items:
            print(cat.name)
        ```

        Inside a coroutine:
        ```python
        async with GraphQLClient(config) as client:
            result = await client.execute_async(operation)
        ```
    """

    def __init__(
        self,
        config: Union[ClientConfig, str],
        transport: Optional[Transport] = None,
        decoder: Optional[Decoder] = None,
        serializer: Optional[DocumentSerializer] = None,
    ):
        """
        Initialize GraphQL client.

        Args:
            config: Client configuration or endpoint URL
            transport: HTTP transport (defaults to AiohttpTransport)
            decoder: JSON decoder for response bodies (defaults to json.loads)
            serializer: Document serializer
        """
        if isinstance(config, str):
            config = ClientConfig(endpoint=config)
        self.config = config
        self.transport = transport or AiohttpTransport(timeout=config.timeout)
        self.decoder: Decoder = decoder or json.loads
        self.serializer = serializer or DocumentSerializer()

    async def __aenter__(self) -> "GraphQLClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Release transport resources."""
        await self.transport.close()

    def execute(
        self,
        operation: Executable,
        variables: Optional[Mapping[str, Any]] = None,
        fragments: Iterable[Fragment] = (),
    ) -> ExecutionResult:
        """
        Execute a GraphQL operation, blocking until the response arrives.

        Args:
            operation: Built Operation, Fragment or document text
            variables: Values for declared operation variables
            fragments: Fragments for spreads that were built by name

        Returns:
            ExecutionResult with the wrapped data

        Raises:
            TransportError: On network failure, timeout or non-2xx status
            DecodeError: If the body is not valid JSON
            ProtocolViolation: If the envelope has neither data nor errors
            GraphQLExecutionError: If errors came back without data, or with
                data while ``raise_on_errors`` is set
        """
        text, body = self._prepare(operation, variables, fragments)
        response = self.transport.send(self.config.url, body, self.config.request_headers())
        return self._handle_response(operation, text, response)

    async def execute_async(
        self,
        operation: Executable,
        variables: Optional[Mapping[str, Any]] = None,
        fragments: Iterable[Fragment] = (),
    ) -> ExecutionResult:
        """Awaitable counterpart of ``execute``."""
        text, body = self._prepare(operation, variables, fragments)
        response = await self.transport.send_async(
            self.config.url, body, self.config.request_headers()
        )
        return self._handle_response(operation, text, response)

    def _prepare(
        self,
        operation: Executable,
        variables: Optional[Mapping[str, Any]],
        fragments: Iterable[Fragment],
    ) -> Tuple[str, str]:
        """Serialize the operation and build the JSON request body."""
        if isinstance(operation, str):
            text = operation
        else:
            text = self.serializer.serialize(operation, fragments)

        request_data: Dict[str, Any] = {"query": text}
        if variables:
            request_data["variables"] = dict(variables)
        name = _operation_name(operation)
        if name:
            request_data["operationName"] = name

        logger.debug(
            "Prepared %s request",
            name or "anonymous",
            extra={"operation_name": name, "document_bytes": len(text)},
        )
        return text, json.dumps(request_data)

    def _handle_response(
        self, operation: Executable, text: str, response: TransportResponse
    ) -> ExecutionResult:
        """Turn a transport response into an ExecutionResult."""
        if not response.ok:
            raise TransportErrorHandler.from_status(
                response.status_code, url=self.config.url, body=response.body
            )

        try:
            envelope = self.decoder(response.body)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON response: {e}", body=response.body) from e

        if not isinstance(envelope, dict):
            raise ProtocolViolation(
                f"Expected a JSON object response, got {type(envelope).__name__}"
            )
        if "data" not in envelope and "errors" not in envelope:
            raise ProtocolViolation("Response contains neither 'data' nor 'errors'")

        errors = envelope.get("errors") or []
        if not isinstance(errors, list):
            raise ProtocolViolation("Response 'errors' must be a list")
        data = envelope.get("data")

        result = ExecutionResult(
            operation=operation,
            query=text,
            data=wrap(data) if data is not None else None,
            errors=tuple(errors),
            extensions=envelope.get("extensions"),
            status_code=response.status_code,
        )

        if errors:
            error = GraphQLExecutionError(errors)
            result = replace(result, error=error)
            error.result = result
            logger.warning(
                "GraphQL response reported errors: %s",
                error.message,
                extra={
                    "operation_name": _operation_name(operation),
                    "status_code": response.status_code,
                },
            )
            if data is None or self.config.raise_on_errors:
                raise error

        return result
