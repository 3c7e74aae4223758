"""Concurrency primitives."""

from .pool import DEFAULT_WORKER_MULTIPLIER, PoolClosedError, ThreadPool, default_workers

__all__ = ["DEFAULT_WORKER_MULTIPLIER", "PoolClosedError", "ThreadPool", "default_workers"]
