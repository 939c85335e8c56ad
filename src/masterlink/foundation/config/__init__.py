"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    MasterlinkSettings,
    RetrySettings,
    TransportSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "MasterlinkSettings",
    "RetrySettings",
    "TransportSettings",
    "clear_settings_cache",
    "get_settings",
]
