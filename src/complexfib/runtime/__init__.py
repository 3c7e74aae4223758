"""Runtime services: thread pool and structured logging."""

from .concurrency import PoolClosedError, ThreadPool, default_workers
from .observability import configure_logging, get_logger, log_context

__all__ = [
    "PoolClosedError", "ThreadPool", "default_workers",
    "configure_logging", "get_logger", "log_context",
]
