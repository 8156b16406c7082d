"""Classification of thrown transport errors.

Maps anything a transport can raise onto one of four kinds (network, http,
timeout, unknown) with a human-readable message. Pure and total: never raises.
"""

from __future__ import annotations

import asyncio
import errno
from typing import Annotated

import httpx
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .errors import (
    RETRYABLE_CODES,
    ErrorCode,
    ErrorKind,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
)

_KIND_CODES: dict[ErrorKind, ErrorCode] = {
    ErrorKind.NETWORK: ErrorCode.NETWORK_ERROR,
    ErrorKind.HTTP: ErrorCode.HTTP_ERROR,
    ErrorKind.TIMEOUT: ErrorCode.TIMEOUT,
    ErrorKind.UNKNOWN: ErrorCode.UNKNOWN,
}

# Bound on __cause__/__context__ walking (chains can be cyclic)
_MAX_CHAIN = 16


class ClassifiedError(BaseModel):
    """Result of classifying a thrown value."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    kind: ErrorKind
    message: Annotated[str, Field(min_length=1)]

    @computed_field
    @property
    def code(self) -> ErrorCode:
        return _KIND_CODES[self.kind]

    @computed_field
    @property
    def recoverable(self) -> bool:
        """Whether another attempt might succeed."""
        return self.code in RETRYABLE_CODES

    def __str__(self) -> str:
        return self.message


def _describe(exc: BaseException) -> str:
    try:
        text = str(exc)
    except Exception:
        text = ""
    return text or type(exc).__name__


def _chain(exc: BaseException) -> list[BaseException]:
    """Exception plus its explicit/implicit causes, outermost first."""
    seen: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and len(seen) < _MAX_CHAIN and all(current is not s for s in seen):
        seen.append(current)
        current = current.__cause__ or current.__context__
    return seen


def _errno_name(exc: BaseException) -> str | None:
    """Symbolic errno (e.g. ECONNREFUSED) from the first OSError in the chain."""
    for link in _chain(exc):
        if isinstance(link, OSError) and link.errno is not None:
            return errno.errorcode.get(link.errno, str(link.errno))
    return None


def _http_status(exc: BaseException) -> tuple[int, str] | None:
    if isinstance(exc, HttpStatusError):
        return exc.status, exc.status_text
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code, exc.response.reason_phrase
    return None


def classify(thrown: object, timeout_ms: int | None = None) -> ClassifiedError:
    """Classify a thrown value.

    Args:
        thrown: Whatever the transport raised (usually an exception)
        timeout_ms: Configured attempt timeout, used in timeout messages

    Returns:
        ClassifiedError with kind and message:
        - http: ``HTTP <status>: <statusText or message>``
        - network: ``Network error <code>: <message>``
        - timeout: ``Request timed out after <timeout_ms>ms``
        - unknown: ``HTTP request failed: <message>``
    """
    if not isinstance(thrown, BaseException):
        return ClassifiedError(kind=ErrorKind.UNKNOWN, message=f"HTTP request failed: {thrown!s}")

    if (status := _http_status(thrown)) is not None:
        code, text = status
        return ClassifiedError(kind=ErrorKind.HTTP, message=f"HTTP {code}: {text or _describe(thrown)}")

    if isinstance(thrown, RequestTimeoutError):
        return ClassifiedError(kind=ErrorKind.TIMEOUT, message=thrown.message)
    if isinstance(thrown, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        msg = f"Request timed out after {timeout_ms}ms" if timeout_ms is not None else f"Request timed out: {_describe(thrown)}"
        return ClassifiedError(kind=ErrorKind.TIMEOUT, message=msg)

    if isinstance(thrown, NetworkError):
        return ClassifiedError(kind=ErrorKind.NETWORK, message=f"Network error {thrown.error_code}: {thrown.message}")
    if isinstance(thrown, (httpx.TransportError, OSError)):
        code = _errno_name(thrown) or type(thrown).__name__
        return ClassifiedError(kind=ErrorKind.NETWORK, message=f"Network error {code}: {_describe(thrown)}")

    return ClassifiedError(kind=ErrorKind.UNKNOWN, message=f"HTTP request failed: {_describe(thrown)}")
