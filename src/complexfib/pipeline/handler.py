"""Request pipeline: raw input string -> response payload.

Per-request states:

    RECEIVED -> VALIDATING -> REJECTED                 (bad request, nothing computed)
                           -> DISPATCHED -> COMPLETED  (result produced)
                                         -> FAILED     (evaluator error)

Nothing is retried here; clients retry if they want to.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import orjson
from pydantic import BaseModel, ConfigDict

from complexfib.core import format_display, parse_input
from complexfib.foundation.errors import ErrorResponse, FibonacciError, NumericalInstabilityError, ParseError
from complexfib.runtime.observability import get_logger, log_context

if TYPE_CHECKING:
    from complexfib.runtime.concurrency import ThreadPool

    from .orchestrator import CacheAside

log = get_logger("complexfib.pipeline")

MISSING_PARAMETER = "Missing 'number' parameter"
INVALID_JSON = "Invalid JSON format"
PARAMETER = "number"


class RequestState(StrEnum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({RequestState.REJECTED, RequestState.COMPLETED, RequestState.FAILED})


class FibonacciResponse(BaseModel):
    """Success body: the input as sent and the display form of the result."""

    model_config = ConfigDict(frozen=True)

    input: str
    result: str


@dataclass(frozen=True, slots=True)
class Outcome:
    """Terminal state of one request with its HTTP status and body."""

    state: RequestState
    payload: FibonacciResponse | ErrorResponse

    @property
    def status_code(self) -> int:
        return 200 if self.state is RequestState.COMPLETED else 400

    @property
    def ok(self) -> bool:
        return self.state is RequestState.COMPLETED

    def body(self) -> dict[str, str]:
        return self.payload.model_dump()

    @classmethod
    def rejected(cls, error: str | FibonacciError) -> Outcome:
        return cls(RequestState.REJECTED, _error_body(error))

    @classmethod
    def failed(cls, error: str | FibonacciError) -> Outcome:
        return cls(RequestState.FAILED, _error_body(error))


def _error_body(error: str | FibonacciError) -> ErrorResponse:
    if isinstance(error, FibonacciError):
        return error.to_response()
    return ErrorResponse(error=error)


class RequestPipeline:
    """Drives parse -> compute -> format for both request shapes."""

    __slots__ = ("_orchestrator", "_pool")

    def __init__(self, orchestrator: CacheAside, pool: ThreadPool) -> None:
        self._orchestrator = orchestrator
        self._pool = pool

    async def handle_query(self, params: Mapping[str, str]) -> Outcome:
        """Query form: ``?number=<input>``."""
        raw = params.get(PARAMETER)
        if raw is None:
            log.warning("missing parameter in query")
            return Outcome.rejected(MISSING_PARAMETER)
        return await self.handle(raw)

    async def handle_body(self, body: bytes) -> Outcome:
        """JSON form: ``{"number": "<input>"}``."""
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            log.warning("invalid JSON body", error=str(e))
            return Outcome.rejected(INVALID_JSON)
        if not isinstance(payload, dict):
            log.warning("JSON body is not an object")
            return Outcome.rejected(INVALID_JSON)
        if PARAMETER not in payload or payload[PARAMETER] is None:
            log.warning("missing parameter in body")
            return Outcome.rejected(MISSING_PARAMETER)
        raw = payload[PARAMETER]
        if not isinstance(raw, str):
            log.warning("parameter is not a string", type=type(raw).__name__)
            return Outcome.rejected(INVALID_JSON)
        return await self.handle(raw)

    async def handle(self, raw: str) -> Outcome:
        """Run one request from a present input string to a terminal outcome."""
        with log_context(request_id=uuid.uuid4().hex[:12]):
            log.info("processing request", input=raw, state=RequestState.RECEIVED.value)
            outcome = await self._run(raw)
            log.info("request finished", input=raw, state=outcome.state.value, status=outcome.status_code)
            return outcome

    async def _run(self, raw: str) -> Outcome:
        log.debug("validating input", state=RequestState.VALIDATING.value)
        try:
            z = await self._pool.run(parse_input, raw)
        except ParseError as e:
            log.warning("failed to parse input", input=raw, error=str(e))
            return Outcome.rejected(e)

        log.debug("dispatched", z=format_display(z), state=RequestState.DISPATCHED.value)
        try:
            result = await self._orchestrator.compute(z)
        except NumericalInstabilityError as e:
            log.error("fibonacci computation failed", input=raw, error=str(e))
            return Outcome.failed(e)

        display = format_display(result)
        log.info("computed", input=raw, result=display)
        return Outcome(RequestState.COMPLETED, FibonacciResponse(input=raw, result=display))
