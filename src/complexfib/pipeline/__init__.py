"""Request pipeline and cache-aside orchestration."""

from .handler import (
    INVALID_JSON,
    MISSING_PARAMETER,
    FibonacciResponse,
    Outcome,
    RequestPipeline,
    RequestState,
)
from .orchestrator import CacheAside, Evaluator

__all__ = [
    "CacheAside", "Evaluator",
    "RequestPipeline", "RequestState", "Outcome", "FibonacciResponse",
    "INVALID_JSON", "MISSING_PARAMETER",
]
