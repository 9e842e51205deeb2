"""
Exception hierarchy for graphql_dsl.

Every error raised by the package derives from GraphQLDSLError. Builder misuse,
serialization structure errors, transport failures, server reported GraphQL
errors and response access errors each get their own branch so that callers
can catch exactly the layer they care about.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import aiohttp

if TYPE_CHECKING:
    from .client import ExecutionResult


class GraphQLDSLError(Exception):
    """
    Base exception for all graphql_dsl operations.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class MalformedQuery(GraphQLDSLError):
    """
    Raised when the query builder is misused.

    Covers field references made outside of any query or fragment scope,
    invalid GraphQL names, unrepresentable argument literals and structurally
    invalid nodes such as an empty inline fragment.
    """

    pass


class SerializationError(GraphQLDSLError):
    """Raised when a document cannot be rendered."""

    pass


class DanglingFragmentReference(SerializationError):
    """Raised when a spread names a fragment that was never supplied."""

    def __init__(self, fragment_name: str) -> None:
        super().__init__(
            f"Fragment '{fragment_name}' is referenced but was not supplied",
            fragment_name=fragment_name,
        )
        self.fragment_name = fragment_name


class DuplicateFragmentName(SerializationError):
    """Raised when two different fragments share one name."""

    def __init__(self, fragment_name: str) -> None:
        super().__init__(
            f"Fragment name '{fragment_name}' is used by fragments with different bodies",
            fragment_name=fragment_name,
        )
        self.fragment_name = fragment_name


class TransportError(GraphQLDSLError):
    """
    Raised for network and HTTP layer failures.

    Attributes:
        url: Endpoint that was being called
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.url = url


class TransportTimeoutError(TransportError):
    """Raised when the request exceeds the configured timeout."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url)
        self.timeout_value = timeout_value


class TransportConnectionError(TransportError):
    """Raised when a connection to the endpoint cannot be established."""

    pass


class HTTPStatusError(TransportError):
    """Raised when the endpoint answers with a non-2xx status code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        url: Optional[str] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message, url)
        self.status_code = status_code
        self.response_text = response_text


class DecodeError(GraphQLDSLError):
    """Raised when a response body is not valid JSON."""

    def __init__(self, message: str, body: Optional[bytes] = None) -> None:
        super().__init__(message)
        self.body = body


class ProtocolViolation(GraphQLDSLError):
    """Raised when a response envelope carries neither data nor errors."""

    pass


class GraphQLExecutionError(GraphQLDSLError):
    """
    Raised when the server reports GraphQL errors.

    Attributes:
        errors: Raw error objects from the response envelope
        result: Execution result holding the partial data, if any
    """

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        result: Optional["ExecutionResult"] = None,
    ) -> None:
        self.errors = list(errors)
        self.result = result
        super().__init__(
            f"GraphQL execution errors: {'; '.join(self.messages)}",
            errors=self.errors,
        )

    @property
    def messages(self) -> List[str]:
        """Get list of error messages."""
        return [
            str(error.get("message", "Unknown error")) if isinstance(error, dict) else str(error)
            for error in self.errors
        ]


class MissingField(GraphQLDSLError, AttributeError):
    """
    Raised when a response object has no such key.

    A key that is present with a null value never raises; it reads as a null
    scalar instead.
    """

    def __init__(self, field_name: str, available: Optional[List[str]] = None) -> None:
        super().__init__(
            f"Response has no field '{field_name}'",
            field_name=field_name,
            available=available or [],
        )
        self.field_name = field_name
        self.available = available or []


class TransportErrorHandler:
    """Converts aiohttp and asyncio failures into TransportError subclasses."""

    @staticmethod
    def from_aiohttp_error(
        error: BaseException,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> TransportError:
        """
        Convert an aiohttp exception to a TransportError subclass.

        Args:
            error: The original exception
            url: The endpoint that caused the error
            timeout_value: Configured timeout in seconds

        Returns:
            Appropriate TransportError subclass
        """
        if isinstance(error, (asyncio.TimeoutError, aiohttp.ServerTimeoutError)):
            return TransportTimeoutError(
                f"Request timed out: {error}", url=url, timeout_value=timeout_value
            )

        elif isinstance(error, aiohttp.ClientConnectionError):
            return TransportConnectionError(f"Connection error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientResponseError):
            return HTTPStatusError(str(error), error.status, url=url)

        else:
            return TransportError(f"Unexpected network error: {error}", url=url)

    @staticmethod
    def from_status(
        status_code: int, url: Optional[str] = None, body: bytes = b""
    ) -> HTTPStatusError:
        """Build the error for a non-2xx response."""
        text = body.decode("utf-8", errors="replace")
        if 500 <= status_code < 600:
            message = f"Server error: HTTP {status_code}"
        else:
            message = f"HTTP {status_code}"
        return HTTPStatusError(message, status_code, url=url, response_text=text)
