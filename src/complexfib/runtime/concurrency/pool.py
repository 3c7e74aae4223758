"""Thread pool for evaluation work and blocking cache calls.

The event loop only accepts connections and awaits; parsing, Binet
evaluation and sync Redis round-trips are handed to these threads.

Example:
    >>> async with ThreadPool(max_workers=4) as pool:
    ...     result = await pool.run(evaluate, complex(5, 0))
"""

from __future__ import annotations

import asyncio
import functools
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

if TYPE_CHECKING:
    from types import TracebackType

T = TypeVar("T")
P = ParamSpec("P")

__all__ = ["ThreadPool", "PoolClosedError", "default_workers", "DEFAULT_WORKER_MULTIPLIER"]

DEFAULT_WORKER_MULTIPLIER = 2


def default_workers(multiplier: int = DEFAULT_WORKER_MULTIPLIER) -> int:
    """Workers proportional to hardware parallelism."""
    return max(1, multiplier * (os.cpu_count() or 1))


class PoolClosedError(RuntimeError):
    """Work submitted after shutdown."""


@dataclass(slots=True)
class ThreadPool:
    """Async-friendly thread pool, started lazily on first use.

    Exceptions raised by the submitted function propagate to the awaiting
    coroutine unchanged.
    """

    max_workers: int = field(default_factory=default_workers)
    thread_name_prefix: str = "complexfib-"
    _executor: ThreadPoolExecutor | None = field(default=None, init=False, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self._closed:
            raise PoolClosedError("thread pool is shut down")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(self.max_workers, self.thread_name_prefix)
        return self._executor

    async def run(self, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
        """Call ``func`` on a worker thread and await its result."""
        call = functools.partial(func, *args, **kwargs) if kwargs else functools.partial(func, *args)
        return await asyncio.get_running_loop().run_in_executor(self.executor, call)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        """Refuse new work. With wait=False running calls are abandoned, not drained."""
        self._closed = True
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait, cancel_futures=cancel_futures)

    async def __aenter__(self) -> ThreadPool:
        self.executor  # noqa: B018 - start threads eagerly
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.shutdown(cancel_futures=exc_type is not None)
