"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration for the master client from
environment variables with sensible defaults. Supports .env files.

The master URI itself is deliberately not a setting: it is resolved only by
masterlink.master.endpoint.resolve_endpoint (override map, then REAL_MASTER_URI).

Example:
    >>> from masterlink.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.interval
    0.05
    >>> settings.retry.timeout
    0.0

    # Or with environment variables:
    # MASTERLINK_RETRY_TIMEOUT=5
    # MASTERLINK_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import (
    Field,
    NonNegativeFloat,
    PositiveFloat,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Retry-until-available configuration for waiting calls."""

    model_config = SettingsConfigDict(
        env_prefix="MASTERLINK_RETRY_",
        extra="ignore",
    )

    timeout: NonNegativeFloat = Field(default=0.0, allow_inf_nan=False, description="Give up after this many seconds; 0 waits forever")
    interval: PositiveFloat = Field(default=0.05, description="Sleep between attempts in seconds")


class TransportSettings(BaseSettings):
    """XML-RPC transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MASTERLINK_TRANSPORT_",
        extra="ignore",
    )

    request_timeout: PositiveFloat = Field(default=10.0, description="Per-attempt HTTP timeout in seconds")
    path: Annotated[str, Field(min_length=1)] = "/"
    serialize_calls: bool = Field(
        default_factory=lambda: sys.platform == "darwin",
        description="Hold one process-wide lock around each transport call",
    )

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MASTERLINK_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class MasterlinkSettings(BaseSettings):
    """Root settings for the master client.

    Loads configuration from environment variables with MASTERLINK_ prefix.

    Example environment variables:
        MASTERLINK_CALLER_ID=/talker
        MASTERLINK_RETRY_TIMEOUT=2.5
        MASTERLINK_TRANSPORT_SERIALIZE_CALLS=true
        MASTERLINK_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="MASTERLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    caller_id: Annotated[str, Field(min_length=1)] = Field(
        default="/masterlink",
        description="Identity sent as the first argument of every master call",
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @computed_field
    @property
    def waits_forever(self) -> bool:
        return self.retry.timeout == 0


@lru_cache(maxsize=1)
def get_settings() -> MasterlinkSettings:
    """Get the global settings instance (cached)."""
    return MasterlinkSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
