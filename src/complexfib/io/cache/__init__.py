"""Cache backends for memoized Fibonacci results.

Backends:
    - RedisCache: redis.asyncio client (default)
    - ThreadedRedisCache: sync redis-py client run on the thread pool
    - MemoryCache: in-process, for local runs and tests

connect_cache() resolves the configured backend at startup and returns None
when the store is unreachable (uncached mode).
"""

from .cache import DEFAULT_TTL, CacheEntry, FibCache, MemoryCache
from .factory import build_cache, connect_cache
from .redis import AsyncRedisClient, RedisCache, RedisClient, ThreadedRedisCache

__all__ = [
    "DEFAULT_TTL",
    "CacheEntry",
    "FibCache",
    "MemoryCache",
    "RedisCache",
    "ThreadedRedisCache",
    "RedisClient",
    "AsyncRedisClient",
    "build_cache",
    "connect_cache",
]
