"""Error codes and exception taxonomy for request execution.

Failures inside `RequestExecutor.execute` are surfaced through `Result`
failures, never raised. The exceptions here are the constructed causes those
failures carry, plus the two directly-raising operations (URL building and
connectivity probing).
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Self

if TYPE_CHECKING:
    from reqkit.http.models import NormalizedResponse


class ErrorCode(StrEnum):
    """Machine-readable failure codes.

    Used for programmatic handling and retry decisions.
    """
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    HTTP_ERROR = "HTTP_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    INVALID_URL = "INVALID_URL"
    CONNECTIVITY = "CONNECTIVITY"
    UNKNOWN = "UNKNOWN"


class ErrorKind(StrEnum):
    """Classification of a thrown transport error."""
    NETWORK = "network"
    HTTP = "http"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


# Codes whose failures may succeed on another attempt
RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.NETWORK_ERROR,
    ErrorCode.TIMEOUT,
})


class RequestException(Exception):
    """Base exception for request execution failures."""

    __slots__ = ("code",)

    code: ErrorCode

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN) -> None:
        self.code = code
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)

    @property
    def recoverable(self) -> bool:
        return self.code in RETRYABLE_CODES


class NetworkError(RequestException):
    """No response reached the client (DNS failure, refused connection, reset)."""

    __slots__ = ("error_code",)

    def __init__(self, error_code: str, message: str) -> None:
        self.error_code = error_code
        super().__init__(message, ErrorCode.NETWORK_ERROR)


class RequestTimeoutError(RequestException):
    """Deadline or caller cancellation fired before the attempt completed."""

    __slots__ = ("timeout_ms", "cancelled")

    def __init__(self, timeout_ms: int, *, cancelled: bool = False) -> None:
        self.timeout_ms = timeout_ms
        self.cancelled = cancelled
        msg = "Request cancelled by caller" if cancelled else f"Request timed out after {timeout_ms}ms"
        super().__init__(msg, ErrorCode.TIMEOUT)


class HttpStatusError(RequestException):
    """Response received but rejected by the status validator."""

    __slots__ = ("status", "status_text", "response")

    def __init__(self, status: int, status_text: str = "", response: NormalizedResponse | None = None) -> None:
        self.status = status
        self.status_text = status_text
        self.response = response
        super().__init__(f"Request failed with status {status}", ErrorCode.HTTP_ERROR)

    @classmethod
    def from_response(cls, response: NormalizedResponse) -> Self:
        return cls(response.status, response.status_text, response)


class SerializationError(RequestException):
    """Request body could not be serialized to JSON."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.SERIALIZATION_ERROR)


class UrlBuildError(RequestException):
    """Raised by `RequestExecutor.build_url`."""

    def __init__(self, message: str) -> None:
        super().__init__(f"URL building failed: {message}", ErrorCode.INVALID_URL)


class ConnectivityError(RequestException):
    """Raised by `RequestExecutor.is_online` when the probe cannot complete."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Network connectivity check failed: {message}", ErrorCode.CONNECTIVITY)
