"""Environment-based configuration using pydantic-settings.

Example:
    >>> from reqkit.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.http.timeout_ms
    30000

    # Or with environment variables:
    # REQKIT_HTTP_TIMEOUT_MS=5000
    # REQKIT_RETRY_MAX_RETRIES=3
    # REQKIT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeInt, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpSettings(BaseSettings):
    """HTTP execution defaults."""

    model_config = SettingsConfigDict(
        env_prefix="REQKIT_HTTP_",
        extra="ignore",
    )

    base_url: str = Field(default="", description="Base URL joined with relative request paths")
    timeout_ms: PositiveInt = Field(default=30_000, description="Per-attempt timeout in milliseconds")
    user_agent: str | None = Field(default=None, description="User-Agent added to default headers when set")
    verify_ssl: bool = True
    follow_redirects: bool = True

    @field_validator("base_url", mode="before")
    @classmethod
    def _strip_base(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class RetrySettings(BaseSettings):
    """Default retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REQKIT_RETRY_",
        extra="ignore",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 0
    base_delay_ms: NonNegativeInt = Field(default=100, description="Backoff base delay in milliseconds")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REQKIT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ReqkitSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with REQKIT_ prefix.
    Supports nested configuration and .env files.
    """

    model_config = SettingsConfigDict(
        env_prefix="REQKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    http: HttpSettings = Field(default_factory=HttpSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ReqkitSettings:
    """Get the global settings instance (cached)."""
    return ReqkitSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
