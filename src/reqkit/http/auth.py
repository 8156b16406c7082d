"""Authentication header strategies.

Secrets are stored as SecretStr to prevent accidental logging/exposure.
Every strategy renders to plain headers, merged after the executor's default
headers and before per-request headers.

Example:
    >>> executor = RequestExecutor(ExecutorConfig(auth=BearerAuth(token="sk-xxx")))
    >>> headers = {**basic_auth("alice", "s3cret"), "Accept": "text/plain"}
"""

from __future__ import annotations

import base64
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, SecretStr, Tag, field_serializer


class BearerAuth(BaseModel):
    """Bearer token authentication (OAuth2, JWT)."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")
    auth_type: Literal["bearer"] = "bearer"
    token: SecretStr = Field(..., description="Bearer token value (OAuth2/JWT)")

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token.get_secret_value()}"}

    @field_serializer("token", when_used="json")
    def _mask_token(self, v: SecretStr) -> str:
        """Mask token in JSON serialization for security."""
        secret = v.get_secret_value()
        return f"{secret[:4]}...{secret[-4:]}" if len(secret) > 8 else "***"

    def __hash__(self) -> int:
        return hash(self.auth_type)


class BasicAuth(BaseModel):
    """HTTP Basic authentication."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")
    auth_type: Literal["basic"] = "basic"
    username: Annotated[str, Field(min_length=1)]
    password: SecretStr

    def headers(self) -> dict[str, str]:
        credentials = base64.b64encode(
            f"{self.username}:{self.password.get_secret_value()}".encode()
        ).decode()
        return {"Authorization": f"Basic {credentials}"}

    @field_serializer("password", when_used="json")
    def _mask_password(self, v: SecretStr) -> str:
        return "***"

    def __hash__(self) -> int:
        return hash((self.auth_type, self.username))


class ApiKeyAuth(BaseModel):
    """API key sent in a custom header."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
        revalidate_instances="never",
    )
    auth_type: Literal["api_key"] = "api_key"
    key: SecretStr = Field(..., description="API key value")
    header_name: Annotated[str, Field(
        default="X-API-Key",
        pattern=r"^[A-Za-z][A-Za-z0-9-]*$",
        description="HTTP header name for the key",
    )]

    def headers(self) -> dict[str, str]:
        return {self.header_name: self.key.get_secret_value()}

    @field_serializer("key", when_used="json")
    def _mask_key(self, v: SecretStr) -> str:
        secret = v.get_secret_value()
        return f"{secret[:4]}..." if len(secret) > 4 else "***"

    def __hash__(self) -> int:
        return hash((self.auth_type, self.header_name))


def _auth_discriminator(v: dict[str, object] | BaseModel) -> str:
    if isinstance(v, dict):
        return str(v.get("auth_type", "bearer"))
    return getattr(v, "auth_type", "bearer")


AuthStrategy = Annotated[
    Annotated[BearerAuth, Tag("bearer")]
    | Annotated[BasicAuth, Tag("basic")]
    | Annotated[ApiKeyAuth, Tag("api_key")],
    Discriminator(_auth_discriminator),
]


def bearer_auth(token: str) -> dict[str, str]:
    """Authorization header for a bearer token."""
    return BearerAuth(token=SecretStr(token)).headers()


def basic_auth(username: str, password: str) -> dict[str, str]:
    """Authorization header for HTTP Basic credentials."""
    return BasicAuth(username=username, password=SecretStr(password)).headers()
