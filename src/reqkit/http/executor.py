"""Request executor - resolve, send, retry, normalize, validate, parse.

Per-execution flow::

    Pending -> Attempting(n) -> Succeeded
                             -> RetryScheduled(n+1) -> Attempting(n+1)
                             -> Failed

Only transport-level throws (network errors, timeouts, caller cancellation)
schedule a retry. A response rejected by the status validator ends the
execution immediately, however many attempts remain.

Example:
    >>> executor = RequestExecutor(ExecutorConfig(
    ...     base_url="https://api.example.com",
    ...     timeout_ms=5000,
    ...     max_retries=2,
    ... ))
    >>> result = await executor.get("/users", query={"page": "1"})
    >>> if result.is_success:
    ...     print(result.value.parsed_body)
    >>>
    >>> created = await executor.post("/users", {"name": "Alice"})
    >>> created.match(
    ...     lambda outcome: outcome.response.status,
    ...     lambda message, cause: message,
    ... )
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Callable, Self

import orjson
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, field_serializer, field_validator

from reqkit.foundation.errors import (
    ConnectivityError,
    Err,
    HttpStatusError,
    Ok,
    RequestTimeoutError,
    Result,
    SerializationError,
    UrlBuildError,
    classify,
    try_fn,
)
from reqkit.io.transport import HttpxTransport, ProxyDescriptor, RawResponse, Transport, TransportRequest
from reqkit.runtime.concurrency import CancellationToken, checkpoint, guard
from reqkit.runtime.retry import RetryPolicy

from .auth import AuthStrategy
from .functions import is_success_status, parse_json
from .models import HttpMethod, RequestDescriptor, RequestOutcome
from .normalize import normalize_raw
from .urls import resolve_url

if TYPE_CHECKING:
    from types import TracebackType

    from reqkit.foundation.config import ReqkitSettings

logger = logging.getLogger("reqkit.executor")

StatusValidator = Callable[[int], bool]
RequestIdFactory = Callable[[], str]

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
DEFAULT_PROBE_URL = "https://httpbin.org/status/200"


def generate_request_id() -> str:
    """Locally unique id: ``req_<epoch ms>_<9 random base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────

class ExecutorConfig(BaseModel):
    """Immutable executor configuration, read-only during every execution.

    Attributes:
        base_url: Joined with relative request URLs ("" = none)
        timeout_ms: Default per-attempt timeout
        default_headers: Headers added to every request
        max_retries: Retries after the initial attempt for transport failures
        retry_base_delay_ms: Backoff base; attempt n waits base * 2**n
        validate_status: Predicate deciding success vs. HTTP failure
        auth: Optional auth strategy rendered after default headers
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        revalidate_instances="never",
        str_strip_whitespace=True,
    )

    base_url: str = ""
    timeout_ms: PositiveInt = 30_000
    default_headers: Mapping[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"},
        validate_default=True,
    )
    max_retries: Annotated[int, Field(ge=0, le=10)] = 0
    retry_base_delay_ms: NonNegativeInt = 100
    validate_status: StatusValidator = Field(default=is_success_status, exclude=True, repr=False)
    auth: AuthStrategy | None = Field(default=None, repr=False)

    @field_validator("default_headers", mode="after")
    @classmethod
    def _freeze_headers(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @field_serializer("default_headers")
    def _dump_headers(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_retries=self.max_retries, base_delay_ms=self.retry_base_delay_ms)

    @classmethod
    def from_settings(cls, settings: ReqkitSettings | None = None, **overrides: Any) -> Self:
        """Build from environment settings; keyword overrides win."""
        if settings is None:
            from reqkit.foundation.config import get_settings
            settings = get_settings()
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if settings.http.user_agent:
            headers["User-Agent"] = settings.http.user_agent
        values: dict[str, Any] = {
            "base_url": settings.http.base_url,
            "timeout_ms": settings.http.timeout_ms,
            "default_headers": headers,
            "max_retries": settings.retry.max_retries,
            "retry_base_delay_ms": settings.retry.base_delay_ms,
        }
        return cls(**{**values, **overrides})

    def __hash__(self) -> int:
        return hash((self.base_url, self.timeout_ms, self.max_retries, self.retry_base_delay_ms))


# ─────────────────────────────────────────────────────────────────────────────
# Executor
# ─────────────────────────────────────────────────────────────────────────────

class RequestExecutor:
    """Executes request descriptors, returning typed success/failure results.

    Stateless per call: concurrent ``execute`` calls share only the immutable
    configuration and the transport.

    Args:
        config: Executor configuration (defaults when omitted)
        transport: Transport primitive (defaults to HttpxTransport)
        request_id_factory: Correlation id generator
    """

    __slots__ = ("_config", "_transport", "_new_request_id", "_owns_transport")

    def __init__(
        self,
        config: ExecutorConfig | None = None,
        *,
        transport: Transport | None = None,
        request_id_factory: RequestIdFactory = generate_request_id,
    ) -> None:
        self._config = config or ExecutorConfig()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport()
        self._new_request_id = request_id_factory

    @classmethod
    def from_settings(cls, settings: ReqkitSettings | None = None, **overrides: Any) -> RequestExecutor:
        """Executor and httpx transport both configured from environment settings."""
        if settings is None:
            from reqkit.foundation.config import get_settings
            settings = get_settings()
        executor = cls(
            ExecutorConfig.from_settings(settings, **overrides),
            transport=HttpxTransport(
                verify_ssl=settings.http.verify_ssl,
                follow_redirects=settings.http.follow_redirects,
            ),
        )
        executor._owns_transport = True
        return executor

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    # ─────────────────────────────────────────────────────────────────
    # Request Preparation
    # ─────────────────────────────────────────────────────────────────

    def _merge_headers(self, descriptor: RequestDescriptor) -> dict[str, str]:
        """Defaults, then auth, then descriptor headers; later layers win case-insensitively."""
        auth = self._config.auth.headers() if self._config.auth is not None else {}
        merged: dict[str, str] = {}
        for layer in (self._config.default_headers, auth, descriptor.headers):
            for key, value in layer.items():
                for existing in [k for k in merged if k.lower() == key.lower()]:
                    del merged[existing]
                merged[key] = value
        return merged

    def _build_request(self, descriptor: RequestDescriptor) -> TransportRequest:
        """Merge headers and serialize the body.

        A structured body is JSON-encoded and forces Content-Type to
        application/json, replacing any content type the caller supplied.
        """
        headers = self._merge_headers(descriptor)
        content: str | None = None
        if descriptor.has_structured_body:
            try:
                content = orjson.dumps(descriptor.body).decode()
            except orjson.JSONEncodeError as e:
                raise SerializationError(f"Request body is not JSON serializable: {e}") from e
            for key in [k for k in headers if k.lower() == "content-type"]:
                del headers[key]
            headers["Content-Type"] = "application/json"
        elif descriptor.body is not None:
            content = descriptor.body

        timeout_ms = descriptor.timeout_ms or self._config.timeout_ms
        return TransportRequest(
            method=descriptor.method,
            url=resolve_url(self._config.base_url, descriptor.url, descriptor.query),
            headers=headers,
            content=content,
            timeout=timeout_ms / 1000,
            proxy=descriptor.proxy,
        )

    # ─────────────────────────────────────────────────────────────────
    # Attempt Loop
    # ─────────────────────────────────────────────────────────────────

    async def _attempt(self, request: TransportRequest, timeout_ms: int, token: CancellationToken | None) -> RawResponse:
        """One transport call under the timeout/cancellation guard."""
        guarded = await guard(self._transport.send(request), timeout=request.timeout, token=token)
        if guarded.completed:
            return guarded.value  # type: ignore[return-value]
        raise RequestTimeoutError(timeout_ms, cancelled=guarded.cancelled)

    async def _send_with_retries(
        self,
        request: TransportRequest,
        timeout_ms: int,
        token: CancellationToken | None,
        request_id: str,
    ) -> Result[RawResponse]:
        policy = self._config.retry_policy
        attempt = 0
        while True:
            logger.debug(
                f"[{request_id}] {request.method} {request.url} attempt {attempt + 1}/{policy.max_attempts}",
                extra={"request_id": request_id, "attempt": attempt},
            )
            try:
                return Ok(await self._attempt(request, timeout_ms, token))
            except Exception as e:
                classified = classify(e, timeout_ms=timeout_ms)
                if not policy.should_retry(attempt):
                    logger.warning(
                        f"[{request_id}] {classified.message} after {attempt + 1} attempt(s)",
                        extra={"request_id": request_id, "kind": classified.kind.value},
                    )
                    return Err(classified.message, e)
                delay = policy.delay_for_attempt(attempt)
                logger.info(
                    f"[{request_id}] Retry {attempt + 1}/{policy.max_retries} after {delay:.0f}ms ({classified.kind})",
                    extra={"request_id": request_id, "kind": classified.kind.value},
                )
                await asyncio.sleep(delay / 1000)
                await checkpoint()
                attempt += 1

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    async def execute(self, descriptor: RequestDescriptor) -> Result[RequestOutcome]:
        """Execute one request.

        Never raises for request-level failures: network errors and timeouts
        (after retries), validator-rejected statuses, and body serialization
        errors all come back as failures carrying a message and cause.
        """
        started_at = time.monotonic()
        generated = try_fn(self._new_request_id, "Request id generation failed")
        if generated.is_failure:
            logger.warning(generated.error)
            return Err(classify(generated.cause).message, generated.cause)
        request_id = generated.unwrap()

        prepared = Ok(descriptor).map(self._build_request)
        if prepared.is_failure:
            logger.warning(f"[{request_id}] {prepared.error}", extra={"request_id": request_id})
            return Err(prepared.error, prepared.cause)
        request = prepared.unwrap()
        timeout_ms = descriptor.timeout_ms or self._config.timeout_ms

        sent = await self._send_with_retries(request, timeout_ms, descriptor.cancel_token, request_id)
        if sent.is_failure:
            return Err(sent.error, sent.cause)

        normalized = sent.map(lambda raw: normalize_raw(request.url, raw, started_at))
        if normalized.is_failure:
            return Err(classify(normalized.cause).message, normalized.cause)
        response = normalized.unwrap()

        accepted = Ok(response.status).map(self._config.validate_status)
        if accepted.is_failure:
            logger.warning(
                f"[{request_id}] status validator raised: {accepted.error}",
                extra={"request_id": request_id, "status": response.status},
            )
            return Err(classify(accepted.cause).message, accepted.cause)
        if not accepted.unwrap():
            logger.warning(
                f"[{request_id}] HTTP {response.status} rejected by status validator",
                extra={"request_id": request_id, "status": response.status},
            )
            return Err(f"HTTP {response.status}: {response.status_text}", HttpStatusError.from_response(response))

        return Ok(RequestOutcome(
            response=response,
            parsed_body=parse_json(response),
            request_id=request_id,
        ))

    # ─────────────────────────────────────────────────────────────────
    # Convenience Wrappers (descriptor builders only)
    # ─────────────────────────────────────────────────────────────────

    async def request(self, method: HttpMethod, url: str, **options: Any) -> Result[RequestOutcome]:
        return await self.execute(RequestDescriptor(url=url, method=method, **options))

    async def get(self, url: str, **options: Any) -> Result[RequestOutcome]:
        return await self.request("GET", url, **options)

    async def post(self, url: str, body: Any = None, **options: Any) -> Result[RequestOutcome]:
        return await self.request("POST", url, body=body, **options)

    async def put(self, url: str, body: Any = None, **options: Any) -> Result[RequestOutcome]:
        return await self.request("PUT", url, body=body, **options)

    async def patch(self, url: str, body: Any = None, **options: Any) -> Result[RequestOutcome]:
        return await self.request("PATCH", url, body=body, **options)

    async def delete(self, url: str, **options: Any) -> Result[RequestOutcome]:
        return await self.request("DELETE", url, **options)

    async def head(self, url: str, **options: Any) -> Result[RequestOutcome]:
        return await self.request("HEAD", url, **options)

    async def options(self, url: str, **options: Any) -> Result[RequestOutcome]:
        return await self.request("OPTIONS", url, **options)

    # ─────────────────────────────────────────────────────────────────
    # Raising Utilities
    # ─────────────────────────────────────────────────────────────────

    def build_url(self, path: str, query: Mapping[str, str] | None = None) -> str:
        """Resolve path against the base URL.

        Raises:
            UrlBuildError: If the inputs cannot be turned into a URL
        """
        if not isinstance(path, str):
            raise UrlBuildError(f"path must be a string, got {type(path).__name__}")
        try:
            return resolve_url(self._config.base_url, path, query)
        except (TypeError, ValueError) as e:
            raise UrlBuildError(str(e)) from e

    async def is_online(
        self,
        probe_url: str = DEFAULT_PROBE_URL,
        *,
        timeout_ms: int = 3000,
        proxy: ProxyDescriptor | None = None,
    ) -> bool:
        """HEAD-probe a well-known endpoint; True iff it answers 2xx.

        Raises:
            ConnectivityError: If the probe fails at the transport level or times out
        """
        request = TransportRequest(method="HEAD", url=probe_url, timeout=timeout_ms / 1000, proxy=proxy)
        try:
            raw = await self._attempt(request, timeout_ms, None)
        except Exception as e:
            raise ConnectivityError(classify(e, timeout_ms=timeout_ms).message) from e
        return is_success_status(raw.status)

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the transport if this executor created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def to_dict(self) -> dict[str, object]:
        """Non-secret configuration snapshot."""
        return {
            "type": type(self).__name__,
            "base_url": self._config.base_url,
            "timeout_ms": self._config.timeout_ms,
            "max_retries": self._config.max_retries,
            "retry_base_delay_ms": self._config.retry_base_delay_ms,
            "default_headers": sorted(self._config.default_headers),
        }

    def __repr__(self) -> str:
        return f"RequestExecutor(base_url={self._config.base_url!r}, timeout_ms={self._config.timeout_ms}, max_retries={self._config.max_retries})"
