"""Cache capability used by the cache-aside orchestrator.

Any store offering GET and SETEX semantics fits. Backends raise
CacheTransportError for store failures so callers handle one error family.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

DEFAULT_TTL: int = 3600  # 1 hour


@runtime_checkable
class FibCache(Protocol):
    """Async key-value store with per-key TTL."""

    async def get(self, key: str) -> str | None: ...
    async def setex(self, key: str, ttl: int, value: str) -> None: ...
    async def ping(self) -> bool: ...
    async def close(self) -> None: ...


@dataclass(slots=True)
class CacheEntry:
    """A cached value with expiration tracking."""
    value: str
    expires_at: float


class MemoryCache:
    """In-process cache with TTL-based expiration.

    Uses a lock so it can be shared by the event loop and worker threads.
    Oldest entries are evicted once ``max_entries`` is reached.

    Example:
        >>> cache = MemoryCache()
        >>> await cache.setex("fib:1 0", 60, "1 0")
        >>> await cache.get("fib:1 0")
        '1 0'
    """

    __slots__ = ("_data", "_max_entries", "_lock", "_clock")

    def __init__(self, max_entries: int = 10_000, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._clock = clock

    async def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._data[key]
                return None
            return entry.value

    async def setex(self, key: str, ttl: int, value: str) -> None:
        with self._lock:
            if key not in self._data and len(self._data) >= self._max_entries:
                self._evict_unlocked()
            self._data[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        with self._lock:
            self._data.clear()

    def _evict_unlocked(self) -> None:
        """Drop expired entries, then the quarter closest to expiry. Caller holds the lock."""
        now = self._clock()
        for key in [k for k, v in self._data.items() if now >= v.expires_at]:
            del self._data[key]
        if len(self._data) >= self._max_entries:
            oldest = sorted(self._data, key=lambda k: self._data[k].expires_at)
            for key in oldest[: max(1, self._max_entries // 4)]:
                del self._data[key]

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._data)
