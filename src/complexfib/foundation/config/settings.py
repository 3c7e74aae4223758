"""Environment-based configuration using pydantic-settings.

Example:
    >>> from complexfib.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.ttl
    3600
    >>> settings.server.port
    8080

    # Or with environment variables:
    # REDIS_URL=redis://localhost:6379/0
    # FIB_CACHE_TTL=600
    # FIB_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import (
    AliasChoices,
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REDIS_URL = "redis://redis:6379"


class CacheSettings(BaseSettings):
    """Cache-related configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIB_CACHE_",
        extra="ignore",
        populate_by_name=True,
    )

    enabled: bool = True
    backend: Literal["redis", "redis-sync", "memory"] = "redis"
    redis_url: SecretStr = Field(
        default=SecretStr(DEFAULT_REDIS_URL),
        validation_alias=AliasChoices("REDIS_URL", "FIB_CACHE_REDIS_URL"),
        description="Connection string of the Redis cache",
    )
    ttl: PositiveInt = Field(default=3600, description="Seconds a cached result lives")
    key_prefix: Annotated[str, Field(min_length=1)] = "fib:"
    max_connections: PositiveInt = Field(default=10, description="Redis connection pool size")
    socket_timeout: PositiveFloat = Field(default=5.0, description="Redis socket timeout in seconds")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIB_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ServerSettings(BaseSettings):
    """HTTP listener and worker pool configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIB_SERVER_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: Annotated[int, Field(ge=1, le=65535)] = 8080
    worker_multiplier: PositiveInt = Field(default=2, description="Worker threads per CPU core")

    @computed_field
    @property
    def workers(self) -> int:
        """Size of the evaluation thread pool."""
        return self.worker_multiplier * (os.cpu_count() or 1)


class FibSettings(BaseSettings):
    """Root settings for the Fibonacci service.

    Example environment variables:
        REDIS_URL=redis://cache:6379/0
        FIB_CACHE_ENABLED=false
        FIB_LOG_FORMAT=json
        FIB_SERVER_PORT=9000
    """

    model_config = SettingsConfigDict(
        env_prefix="FIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


@lru_cache(maxsize=1)
def get_settings() -> FibSettings:
    """Get the global settings instance (cached)."""
    return FibSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
