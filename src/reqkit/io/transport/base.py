"""Transport abstraction: one HTTP exchange, no retries, no interpretation.

The executor talks to the network only through a `Transport`. A transport
either returns a `RawResponse` or raises; the executor classifies whatever it
raises. Proxy descriptors are forwarded opaquely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Literal, Protocol, runtime_checkable
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer

ProxyProtocol = Literal["http", "https", "socks5"]


class ProxyDescriptor(BaseModel):
    """Proxy connection passed through to the transport.

    Password is stored as SecretStr to prevent accidental logging/exposure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True, revalidate_instances="never")

    host: Annotated[str, Field(min_length=1)]
    port: Annotated[int, Field(ge=1, le=65535)]
    protocol: ProxyProtocol = "http"
    username: str | None = None
    password: SecretStr | None = None
    id: str | None = Field(default=None, description="Provider-side identifier")
    country: str | None = Field(default=None, description="Exit country, informational")

    @property
    def url(self) -> str:
        """``protocol://[user[:pass]@]host:port`` with credentials percent-encoded."""
        auth = ""
        if self.username:
            auth = quote(self.username, safe="")
            if self.password is not None:
                auth += ":" + quote(self.password.get_secret_value(), safe="")
            auth += "@"
        return f"{self.protocol}://{auth}{self.host}:{self.port}"

    @field_serializer("password", when_used="json")
    def _mask_password(self, v: SecretStr | None) -> str | None:
        return None if v is None else "***"

    def __hash__(self) -> int:
        return hash((self.protocol, self.host, self.port, self.username))


@dataclass(frozen=True, slots=True)
class TransportRequest:
    """Fully prepared request handed to a transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: str | None = None
    timeout: float | None = None  # seconds
    proxy: ProxyDescriptor | None = None


@dataclass(frozen=True, slots=True)
class RawResponse:
    """What a transport returns for a completed exchange."""

    status: int
    status_text: str
    headers: dict[str, str]
    body: str


@runtime_checkable
class Transport(Protocol):
    """Performs a single HTTP request.

    Implementations must be safe to call concurrently; any connection pool
    they keep is theirs to guard.
    """

    async def send(self, request: TransportRequest) -> RawResponse:
        """Perform the exchange, raising on any transport-level failure."""
        ...

    async def aclose(self) -> None:
        """Release pooled resources."""
        ...
