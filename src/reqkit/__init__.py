"""Reqkit - Typed HTTP request execution with retries and timeouts.

Every request comes back as a Result: either a normalized response with a
best-effort parsed JSON body, or a failure message with its cause. Transport
failures are retried with exponential backoff; rejected statuses are not.

Quick Start:
    >>> from reqkit import ExecutorConfig, RequestExecutor
    >>>
    >>> async with RequestExecutor(ExecutorConfig(
    ...     base_url="https://api.example.com",
    ...     max_retries=2,
    ... )) as executor:
    ...     result = await executor.get("/users", query={"page": "1"})
    ...
    >>> result.match(
    ...     lambda outcome: outcome.parsed_body,
    ...     lambda message, cause: print(f"failed: {message}"),
    ... )

Cancellation:
    >>> from reqkit import CancellationToken, RequestDescriptor
    >>> token = CancellationToken()
    >>> pending = executor.execute(RequestDescriptor(url="/slow", cancel_token=token))
    >>> token.cancel()

Environment Configuration:
    >>> # REQKIT_HTTP_BASE_URL=https://api.example.com REQKIT_RETRY_MAX_RETRIES=3
    >>> executor = RequestExecutor.from_settings()
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    ClassifiedError,
    ConnectivityError,
    Err,
    ErrorCode,
    ErrorKind,
    HttpStatusError,
    NetworkError,
    Ok,
    RequestException,
    RequestTimeoutError,
    Result,
    SerializationError,
    UrlBuildError,
    classify,
)

# Configuration
from .foundation.config import ReqkitSettings, get_settings

# HTTP
from .http import (
    ApiKeyAuth,
    BasicAuth,
    BearerAuth,
    ExecutorConfig,
    HttpMethod,
    NormalizedResponse,
    RequestDescriptor,
    RequestExecutor,
    RequestOutcome,
    resolve_url,
)

# Transport
from .io.transport import HttpxTransport, ProxyDescriptor, Transport

# Runtime
from .runtime.concurrency import CancellationToken
from .runtime.observability import configure_logging
from .runtime.retry import RetryPolicy, retry_call

__all__ = [
    # Version
    "__version__",
    # Errors
    "ErrorCode",
    "ErrorKind",
    "RequestException",
    "NetworkError",
    "RequestTimeoutError",
    "HttpStatusError",
    "SerializationError",
    "UrlBuildError",
    "ConnectivityError",
    "ClassifiedError",
    "classify",
    # Result
    "Result",
    "Ok",
    "Err",
    # Configuration
    "ReqkitSettings",
    "get_settings",
    # HTTP
    "HttpMethod",
    "RequestDescriptor",
    "NormalizedResponse",
    "RequestOutcome",
    "ExecutorConfig",
    "RequestExecutor",
    "resolve_url",
    "BearerAuth",
    "BasicAuth",
    "ApiKeyAuth",
    # Transport
    "Transport",
    "HttpxTransport",
    "ProxyDescriptor",
    # Runtime
    "CancellationToken",
    "RetryPolicy",
    "retry_call",
    "configure_logging",
]
