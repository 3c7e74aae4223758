"""Configuration management using pydantic-settings."""

from .settings import (
    DEFAULT_REDIS_URL,
    CacheSettings,
    FibSettings,
    LoggingSettings,
    ServerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DEFAULT_REDIS_URL",
    "CacheSettings",
    "FibSettings",
    "LoggingSettings",
    "ServerSettings",
    "clear_settings_cache",
    "get_settings",
]
