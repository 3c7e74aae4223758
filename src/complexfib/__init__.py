"""complexfib - Fibonacci at complex indices over HTTP, memoized in Redis.

Evaluates Binet's closed form F(z) = (phi**z - psi**z) / sqrt(5) for any
complex z, with results cached by input (cache-aside) when a Redis store is
reachable and computed directly when it is not.

Quick Start:
    >>> from complexfib import evaluate, format_display, parse_input
    >>> format_display(evaluate(parse_input("10")))
    '55.0000000000000...+0.0000000000000...i'

Serving:
    $ REDIS_URL=redis://localhost:6379 complexfib
    $ curl 'localhost:8080/fibonacci?number=3+4'
"""

from __future__ import annotations

__version__ = "0.1.0"

from .core import evaluate, format_display, format_for_cache, parse_from_cache, parse_input
from .foundation.config import FibSettings, get_settings
from .foundation.errors import (
    CacheError,
    CacheFormatError,
    CacheTransportError,
    ErrorCode,
    FibonacciError,
    NumericalInstabilityError,
    ParseError,
)
from .io.cache import FibCache, MemoryCache, RedisCache, ThreadedRedisCache
from .pipeline import CacheAside, Outcome, RequestPipeline, RequestState

__all__ = [
    "__version__",
    # Core
    "evaluate", "parse_input", "format_display", "format_for_cache", "parse_from_cache",
    # Config
    "FibSettings", "get_settings",
    # Errors
    "ErrorCode", "FibonacciError", "ParseError", "NumericalInstabilityError",
    "CacheError", "CacheFormatError", "CacheTransportError",
    # Cache
    "FibCache", "MemoryCache", "RedisCache", "ThreadedRedisCache",
    # Pipeline
    "CacheAside", "RequestPipeline", "RequestState", "Outcome",
]
