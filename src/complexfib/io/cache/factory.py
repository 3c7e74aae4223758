"""Startup resolution of the optional cache capability."""

from __future__ import annotations

from typing import TYPE_CHECKING

from complexfib.runtime.observability import get_logger

from .cache import FibCache, MemoryCache

if TYPE_CHECKING:
    from complexfib.foundation.config import CacheSettings
    from complexfib.runtime.concurrency import ThreadPool

log = get_logger("complexfib.cache")


def build_cache(settings: CacheSettings, pool: ThreadPool) -> FibCache:
    """Instantiate the configured backend without connecting."""
    url = settings.redis_url.get_secret_value()
    match settings.backend:
        case "memory":
            return MemoryCache()
        case "redis-sync":
            from .redis import ThreadedRedisCache
            return ThreadedRedisCache.from_url(
                url, pool, max_connections=settings.max_connections, socket_timeout=settings.socket_timeout,
            )
        case _:
            from .redis import RedisCache
            return RedisCache.from_url(
                url, max_connections=settings.max_connections, socket_timeout=settings.socket_timeout,
            )


async def connect_cache(settings: CacheSettings, pool: ThreadPool) -> FibCache | None:
    """Build and ping the cache. None means run uncached.

    An unreachable store is not fatal: the service computes every request.
    """
    if not settings.enabled:
        log.info("cache disabled, computing every request")
        return None

    cache = build_cache(settings, pool)
    if await cache.ping():
        log.info("cache connected", backend=settings.backend)
        return cache

    log.warning("cache connection failed", backend=settings.backend)
    log.info("continuing without cache")
    await cache.close()
    return None
