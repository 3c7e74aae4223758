"""Tests for structured logging."""

from __future__ import annotations

import io

import orjson
import pytest

from complexfib.runtime.observability import (
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
    log_context,
)


def _lines(buf: io.StringIO) -> list[dict]:
    return [orjson.loads(line) for line in buf.getvalue().splitlines()]


def test_json_output() -> None:
    buf = io.StringIO()
    assert isinstance(configure_logging("json", output=buf), JsonRenderer)

    get_logger("complexfib.test", component="cache").info("cache hit", key="fib:1 0")

    (entry,) = _lines(buf)
    assert entry["event"] == "cache hit"
    assert entry["level"] == "info"
    assert entry["logger"] == "complexfib.test"
    assert entry["component"] == "cache"
    assert entry["key"] == "fib:1 0"
    assert "timestamp" in entry


def test_level_filtering() -> None:
    buf = io.StringIO()
    configure_logging("json", "warning", output=buf)
    log = get_logger("t")

    log.debug("hidden")
    log.info("hidden")
    log.warning("shown")
    log.error("shown too")

    assert [e["event"] for e in _lines(buf)] == ["shown", "shown too"]


def test_scoped_context() -> None:
    buf = io.StringIO()
    configure_logging("json", output=buf)
    log = get_logger("t")

    with log_context(request_id="abc123"):
        log.info("inside")
    log.info("outside")

    inside, outside = _lines(buf)
    assert inside["request_id"] == "abc123"
    assert "request_id" not in outside


def test_bind_and_unbind() -> None:
    buf = io.StringIO()
    configure_logging("json", output=buf)
    base = get_logger("t")
    bound = base.bind(key="fib:2 0")

    bound.info("a")
    bound.unbind("key").info("b")

    a, b = _lines(buf)
    assert a["key"] == "fib:2 0"
    assert "key" not in b
    assert base.context == {"logger": "t"}


def test_console_output() -> None:
    buf = io.StringIO()
    renderer = configure_logging("console", output=buf, colors=False)
    assert isinstance(renderer, ConsoleRenderer)

    get_logger("t").info("computed", ttl=3600)

    line = buf.getvalue()
    assert "[info] computed" in line
    assert "ttl=3600" in line
    assert 'logger="t"' in line
    assert "\033[" not in line


def test_none_format() -> None:
    assert isinstance(configure_logging("none"), NoOpRenderer)


def test_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging("xml")
