"""In-memory test doubles for the cache layer and the evaluator."""

from __future__ import annotations

import threading

from redis.exceptions import ConnectionError as RedisConnectionError

from complexfib.core import evaluate
from complexfib.foundation.errors import CacheTransportError


class MockRedisClient:
    """In-memory mock of sync Redis client."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    def get(self, name: str) -> bytes | None:
        return self.data.get(name)

    def setex(self, name: str, time: int, value: str) -> bool:
        self.data[name] = value.encode()
        self.ttls[name] = time
        return True

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True


class MockAsyncRedisClient:
    """In-memory mock of async Redis client."""

    def __init__(self) -> None:
        self.sync = MockRedisClient()

    async def get(self, name: str) -> bytes | None:
        return self.sync.get(name)

    async def setex(self, name: str, time: int, value: str) -> bool:
        return self.sync.setex(name, time, value)

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.sync.close()


class BrokenAsyncRedisClient(MockAsyncRedisClient):
    """Async client whose connection is gone."""

    async def get(self, name: str) -> bytes | None:
        raise RedisConnectionError("Connection refused")

    async def setex(self, name: str, time: int, value: str) -> bool:
        raise RedisConnectionError("Connection refused")

    async def ping(self) -> bool:
        raise RedisConnectionError("Connection refused")


class FlakyCache:
    """FibCache double with switchable GET/SETEX failures and call recording."""

    def __init__(self, *, fail_get: bool = False, fail_set: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.gets: list[str] = []
        self.sets: list[tuple[str, int, str]] = []

    async def get(self, key: str) -> str | None:
        self.gets.append(key)
        if self.fail_get:
            raise CacheTransportError(f"GET {key!r} failed: timeout")
        return self.data.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.sets.append((key, ttl, value))
        if self.fail_set:
            raise CacheTransportError(f"SETEX {key!r} failed: read-only replica")
        self.data[key] = value

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass


class CountingEvaluator:
    """Wraps the real evaluator and counts invocations (thread-safe)."""

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, z: complex) -> complex:
        with self._lock:
            self.calls += 1
        return evaluate(z)
