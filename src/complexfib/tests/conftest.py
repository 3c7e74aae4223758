"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from complexfib.runtime.concurrency import ThreadPool
from complexfib.runtime.observability import configure_logging

from .doubles import CountingEvaluator


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Silence log output during tests."""
    configure_logging("none")
    yield
    configure_logging("none")


@pytest.fixture
def pool() -> Iterator[ThreadPool]:
    p = ThreadPool(max_workers=2)
    yield p
    p.shutdown(wait=True)


@pytest.fixture
def counting_evaluator() -> CountingEvaluator:
    return CountingEvaluator()
