"""Value types flowing through request execution.

All models are frozen: a descriptor is built once per call and consumed once,
a normalized response is built once per completed attempt.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    computed_field,
    field_validator,
)

from reqkit.io.transport import ProxyDescriptor
from reqkit.runtime.concurrency import CancellationToken

# Type alias for HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
ALL_METHODS: frozenset[HttpMethod] = frozenset(["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])


def header_value(headers: dict[str, str], key: str) -> str | None:
    """Get header value case-insensitively (O(n) but headers are small)."""
    key_lower = key.lower()
    return next((v for k, v in headers.items() if k.lower() == key_lower), None)


# ─────────────────────────────────────────────────────────────────────────────
# Request
# ─────────────────────────────────────────────────────────────────────────────

class RequestDescriptor(BaseModel):
    """Immutable description of one HTTP call.

    Attributes:
        url: Absolute URL, or a path resolved against the executor's base URL
        method: HTTP method (normalized to upper case)
        headers: Per-request headers; override executor defaults on collision
        query: Query parameters appended as ``?k=v&...``
        body: Raw string sent as-is, or any other value serialized as JSON
        timeout_ms: Per-attempt timeout; None uses the executor default
        cancel_token: Caller cancellation signal
        proxy: Opaque proxy descriptor forwarded to the transport
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,  # For CancellationToken
        revalidate_instances="never",
        json_schema_extra={
            "title": "HTTP Request Descriptor",
            "examples": [{
                "url": "/users",
                "method": "POST",
                "body": {"name": "Alice"},
            }],
        },
    )

    url: str
    method: HttpMethod = "GET"
    headers: dict[str, str] = Field(default_factory=dict, repr=False)
    query: dict[str, str] | None = Field(default=None, repr=False)
    body: Any = Field(default=None, repr=False)
    timeout_ms: PositiveInt | None = None
    cancel_token: CancellationToken | None = Field(default=None, repr=False, exclude=True)
    proxy: ProxyDescriptor | None = Field(default=None, repr=False)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @computed_field
    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def has_structured_body(self) -> bool:
        """Body will be JSON-serialized (anything other than a plain string)."""
        return self.body is not None and not isinstance(self.body, str)


# ─────────────────────────────────────────────────────────────────────────────
# Response
# ─────────────────────────────────────────────────────────────────────────────

class NormalizedResponse(BaseModel):
    """Uniform response record for one completed attempt."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        revalidate_instances="never",
    )

    url: str
    status: Annotated[int, Field(ge=100, le=599)]
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict, repr=False)
    body: str = Field(default="", repr=False)  # Often large
    timestamp: datetime
    duration_ms: NonNegativeInt

    @computed_field
    @property
    def ok(self) -> bool:
        """True iff status is 2xx, regardless of any configured validator."""
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status < 600

    def header(self, key: str) -> str | None:
        return header_value(self.headers, key)

    @property
    def content_type(self) -> str | None:
        """Content-Type without parameters (case-insensitive lookup)."""
        ct = self.header("content-type")
        return ct.split(";")[0].strip() if ct else None

    def __hash__(self) -> int:
        return hash((self.status, self.url, self.timestamp))


class RequestOutcome(BaseModel):
    """Success value of an execution."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    response: NormalizedResponse
    parsed_body: Any = Field(default=None, description="JSON-decoded body, None when absent or unparseable")
    request_id: Annotated[str, Field(min_length=1)]

    @property
    def status(self) -> int:
        return self.response.status
