"""Redis cache backends.

- RedisCache: redis.asyncio client, non-blocking
- ThreadedRedisCache: sync redis-py client, each call handed off to the
  thread pool

Both translate every client failure into CacheTransportError. Values come
back decoded to str whether or not the client uses ``decode_responses``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from redis.exceptions import RedisError

from complexfib.foundation.errors import CacheFormatError, CacheTransportError

if TYPE_CHECKING:
    from complexfib.runtime.concurrency import ThreadPool


@runtime_checkable
class RedisClient(Protocol):
    """Protocol for sync Redis client (duck typing)."""
    def get(self, name: str) -> bytes | str | None: ...
    def setex(self, name: str, time: int, value: str) -> bool: ...
    def ping(self) -> bool: ...
    def close(self) -> None: ...


@runtime_checkable
class AsyncRedisClient(Protocol):
    """Protocol for async Redis client (duck typing)."""
    async def get(self, name: str) -> bytes | str | None: ...
    async def setex(self, name: str, time: int, value: str) -> bool: ...
    async def ping(self) -> bool: ...
    async def aclose(self) -> None: ...


def _decode(key: str, raw: bytes | str | None) -> str | None:
    if raw is None or isinstance(raw, str):
        return raw
    try:
        return raw.decode()
    except UnicodeDecodeError as e:
        raise CacheFormatError(f"cached value for {key!r} is not valid UTF-8") from e


class RedisCache:
    """Async Redis-backed cache.

    Args:
        client: Existing ``redis.asyncio`` client

    Example:
        >>> cache = RedisCache.from_url("redis://localhost:6379/0", max_connections=10)
        >>> await cache.setex("fib:5 0", 3600, "5 0")
    """

    __slots__ = ("_client",)

    def __init__(self, client: AsyncRedisClient) -> None:
        self._client = client

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        max_connections: int = 10,
        socket_timeout: float | None = None,
        **redis_kwargs: object,
    ) -> RedisCache:
        """Create cache with a pooled ``redis.asyncio`` client. Does not connect yet."""
        import redis.asyncio as aioredis
        client = aioredis.from_url(
            url,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            **redis_kwargs,
        )
        return cls(client)

    async def get(self, key: str) -> str | None:
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as e:
            raise CacheTransportError(f"GET {key!r} failed: {e}") from e
        return _decode(key, raw)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            await self._client.setex(key, ttl, value)
        except (RedisError, OSError) as e:
            raise CacheTransportError(f"SETEX {key!r} failed: {e}") from e

    async def ping(self) -> bool:
        """Check Redis connection health."""
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        await self._client.aclose()


class ThreadedRedisCache:
    """Sync Redis client driven from async code via the thread pool.

    A failure anywhere in the hand-off (client error, pool already shut down)
    surfaces as CacheTransportError.

    Args:
        client: Existing sync ``redis.Redis`` client
        pool: Thread pool running the blocking calls
    """

    __slots__ = ("_client", "_pool")

    def __init__(self, client: RedisClient, pool: ThreadPool) -> None:
        self._client = client
        self._pool = pool

    @classmethod
    def from_url(
        cls,
        url: str,
        pool: ThreadPool,
        *,
        max_connections: int = 10,
        socket_timeout: float | None = None,
        **redis_kwargs: object,
    ) -> ThreadedRedisCache:
        import redis
        client = redis.from_url(
            url,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            **redis_kwargs,
        )
        return cls(client, pool)

    async def get(self, key: str) -> str | None:
        try:
            raw = await self._pool.run(self._client.get, key)
        except Exception as e:
            raise CacheTransportError(f"GET {key!r} failed: {e}") from e
        return _decode(key, raw)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            await self._pool.run(self._client.setex, key, ttl, value)
        except Exception as e:
            raise CacheTransportError(f"SETEX {key!r} failed: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._pool.run(self._client.ping))
        except Exception:
            return False

    async def close(self) -> None:
        self._client.close()
