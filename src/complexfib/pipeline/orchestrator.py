"""Cache-aside orchestration around the evaluator.

    no cache        -> evaluate
    GET hit         -> decode and return, evaluator not called
    GET miss        -> evaluate, SETEX (failure logged, result still returned)
    GET error       -> evaluate, no write
    undecodable hit -> same as GET error

Cache health never decides whether a request succeeds; only the evaluator can
fail one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from complexfib.core import (
    DEFAULT_KEY_PREFIX,
    cache_key,
    evaluate,
    format_display,
    format_for_cache,
    parse_from_cache,
)
from complexfib.foundation.errors import CacheError
from complexfib.io.cache import DEFAULT_TTL
from complexfib.runtime.observability import get_logger

if TYPE_CHECKING:
    from complexfib.io.cache import FibCache
    from complexfib.runtime.concurrency import ThreadPool

log = get_logger("complexfib.orchestrator")

Evaluator = Callable[[complex], complex]


class CacheAside:
    """Memoizes evaluator results by input in an optional cache.

    Args:
        cache: Cache capability, or None to always compute
        pool: Thread pool the evaluator runs on
        ttl: Seconds a stored result lives
        prefix: Cache key prefix
        evaluator: Function computing the result (replaceable in tests)
    """

    __slots__ = ("_cache", "_pool", "_ttl", "_prefix", "_evaluator")

    def __init__(
        self,
        cache: FibCache | None,
        pool: ThreadPool,
        *,
        ttl: int = DEFAULT_TTL,
        prefix: str = DEFAULT_KEY_PREFIX,
        evaluator: Evaluator = evaluate,
    ) -> None:
        self._cache = cache
        self._pool = pool
        self._ttl = ttl
        self._prefix = prefix
        self._evaluator = evaluator

    @property
    def cached(self) -> bool:
        return self._cache is not None

    async def compute(self, z: complex) -> complex:
        """Fibonacci of ``z``, served from the cache when possible.

        Raises:
            NumericalInstabilityError: from the evaluator
        """
        if self._cache is None:
            log.debug("cache not available, computing directly", z=format_display(z))
            return await self._evaluate(z)

        key = cache_key(z, self._prefix)
        try:
            cached = await self._lookup(self._cache, key)
        except CacheError as e:
            log.warning("cache error, computing directly", key=key, error=str(e), code=e.code.value)
            return await self._evaluate(z)

        if cached is not None:
            log.info("cache hit", key=key)
            return cached

        log.debug("cache miss", key=key)
        result = await self._evaluate(z)
        await self._store(self._cache, key, result)
        return result

    async def _lookup(self, cache: FibCache, key: str) -> complex | None:
        raw = await cache.get(key)
        return None if raw is None else parse_from_cache(raw)

    async def _store(self, cache: FibCache, key: str, result: complex) -> None:
        try:
            await cache.setex(key, self._ttl, format_for_cache(result))
        except CacheError as e:
            log.warning("failed to save to cache", key=key, error=str(e))
        else:
            log.debug("cached result", key=key, ttl=self._ttl)

    async def _evaluate(self, z: complex) -> complex:
        return await self._pool.run(self._evaluator, z)
