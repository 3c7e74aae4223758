"""Structured logging with bound and scoped context.

- Bound context: key-value pairs carried by a logger (``log.bind(...)``)
- Scoped context: pairs attached to every entry inside ``with log_context(...)``
  (per-request ids, survives awaits)
- Human-readable console output for development, JSON lines for production

Quick Start:
    >>> from complexfib.runtime.observability import configure_logging, get_logger
    >>> configure_logging(format="console", level="DEBUG")
    >>> log = get_logger("complexfib.cache")
    >>> log.info("cache hit", key="fib:5.0000000000000000 0.0000000000000000")
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

import orjson

if TYPE_CHECKING:
    from types import TracebackType

JsonDict = dict[str, Any]

# Per-request pairs; ContextVar so concurrent requests never mix ids
_request_scope: ContextVar[JsonDict] = ContextVar("complexfib_log_scope", default={})


# ─────────────────────────────────────────────────────────────────────────────
# Logger
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class LogEntry:
    """Single log record with merged context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def when(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=UTC)


@dataclass(slots=True, frozen=True)
class BoundLogger:
    """Structured logger with bound context. bind() returns a new logger.

    Example:
        >>> log = BoundLogger(context={"logger": "api"})
        >>> log.bind(key="fib:1 0").debug("cache miss")
        # => 10:30:45.123 [debug] cache miss key="fib:1 0" logger="api"
    """

    context: JsonDict = field(default_factory=dict)

    def bind(self, **kw: Any) -> BoundLogger:
        return BoundLogger(context={**self.context, **kw})

    def unbind(self, *keys: str) -> BoundLogger:
        dropped = set(keys)
        return BoundLogger(context={k: v for k, v in self.context.items() if k not in dropped})

    def _emit(self, level: int, event: str, kw: JsonDict) -> None:
        if level < _state.level:
            return
        # request scope < bound < call-site
        context = _request_scope.get() | self.context | kw
        entry = LogEntry(time.time(), logging.getLevelName(level).lower(), event, context)
        _state.renderer.render(entry)

    def debug(self, event: str, **kw: Any) -> None:
        self._emit(logging.DEBUG, event, kw)

    def info(self, event: str, **kw: Any) -> None:
        self._emit(logging.INFO, event, kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._emit(logging.WARNING, event, kw)

    def error(self, event: str, **kw: Any) -> None:
        self._emit(logging.ERROR, event, kw)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    """Anything that can write a LogEntry somewhere."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """One line per entry: ``HH:MM:SS.mmm [level] event key=value ...``.

    ANSI colors follow the TTY unless ``colors`` is given.
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None

    def __post_init__(self) -> None:
        if self.colors is None:
            isatty = getattr(self.output, "isatty", None)
            self.colors = bool(isatty and isatty())

    def _paint(self, code: str, text: str) -> str:
        return f"\033[{code}m{text}\033[0m" if self.colors else text

    def render(self, entry: LogEntry) -> None:
        stamp = entry.when.strftime("%H:%M:%S.%f")[:-3]
        pairs = " ".join(
            f"{self._paint('36', key)}={_repr_value(value)}"
            for key, value in sorted(entry.context.items())
        )
        head = (
            f"{self._paint('2', stamp)} "
            f"{self._paint(_LEVEL_ANSI.get(entry.level, '2'), f'[{entry.level}]')} "
            f"{self._paint('1', entry.event)}"
        )
        print(f"{head} {pairs}" if pairs else head, file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines output for log aggregation."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.when.isoformat(), "level": entry.level, "event": entry.event}
        record.update(entry.context)
        self.output.write(orjson.dumps(record, default=str, option=orjson.OPT_APPEND_NEWLINE).decode())


@dataclass(slots=True)
class NoOpRenderer:
    """Discards everything (tests, ``FIB_LOG_FORMAT=none``)."""

    def render(self, entry: LogEntry) -> None:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide configuration
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class _LogState:
    renderer: LogRenderer = field(default_factory=ConsoleRenderer)
    level: int = logging.INFO


# Shared by the event loop and the worker threads
_state = _LogState()


def configure_logging(
    format: str = "console",  # noqa: A002 - mirrors FIB_LOG_FORMAT
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Select the renderer and minimum level. Format: "console", "json" or "none"."""
    match format:
        case "console": renderer: LogRenderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
        case "json": renderer = JsonRenderer(output=output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _state.renderer = renderer
    _state.level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return renderer


def get_logger(name: str | None = None, **initial_context: Any) -> BoundLogger:
    """Get a structured logger. Name is added to context as 'logger'."""
    if name:
        initial_context["logger"] = name
    return BoundLogger(context=initial_context)


class log_context:
    """Attach key-value pairs to every entry logged inside the block.

    Example:
        >>> with log_context(request_id="3f2a9c01b7de"):
        ...     log.info("processing request")  # includes request_id
    """

    __slots__ = ("_pairs", "_token")

    def __init__(self, **kw: Any) -> None:
        self._pairs = kw
        self._token = None

    def __enter__(self) -> log_context:
        self._token = _request_scope.set(_request_scope.get() | self._pairs)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _request_scope.reset(self._token)
            self._token = None


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


_LEVEL_ANSI = {"debug": "2", "info": "32", "warning": "33", "error": "31", "critical": "31"}


def _repr_value(value: object) -> str:
    match value:
        case str():
            return f'"{value}"'
        case bool():
            return "true" if value else "false"
        case int() | float():
            return str(value)
        case _:
            return repr(value)
