"""Error taxonomy for the Fibonacci service.

Client-facing failures (parse, numerical instability) are reported as 400s.
Cache failures never leave the orchestrator; they downgrade the request to a
direct computation.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(StrEnum):
    """Machine-readable error codes."""
    PARSE_ERROR = "PARSE_ERROR"
    NUMERICAL_INSTABILITY = "NUMERICAL_INSTABILITY"
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_FORMAT = "CACHE_FORMAT"
    CACHE_TRANSPORT = "CACHE_TRANSPORT"


# Codes whose message is safe to hand back to the caller
_CLIENT_FACING: frozenset[ErrorCode] = frozenset({
    ErrorCode.PARSE_ERROR,
    ErrorCode.NUMERICAL_INSTABILITY,
})


class ErrorResponse(BaseModel):
    """JSON error body returned by the HTTP surface."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "title": "Error Response",
            "examples": [{"error": "invalid number format: 'abc'"}],
        },
    )

    error: Annotated[str, Field(min_length=1, description="Human-readable error message")]


class FibonacciError(Exception):
    """Base for every error raised by complexfib."""

    __slots__ = ()

    code: ErrorCode = ErrorCode.PARSE_ERROR

    @property
    def client_facing(self) -> bool:
        return self.code in _CLIENT_FACING

    def to_response(self) -> ErrorResponse:
        """Body for a 400; only meaningful for client-facing codes."""
        return ErrorResponse(error=str(self) or self.code.value)


class ParseError(FibonacciError):
    """Input string is malformed or has the wrong number of components."""

    __slots__ = ()
    code = ErrorCode.PARSE_ERROR


class NumericalInstabilityError(FibonacciError):
    """Evaluator produced NaN or an infinite component."""

    __slots__ = ()
    code = ErrorCode.NUMERICAL_INSTABILITY

    def __init__(self, message: str = "Numerical instability in Fibonacci computation") -> None:
        super().__init__(message)


class CacheError(FibonacciError):
    """Any failure of the cache layer. Never surfaced to clients."""

    __slots__ = ()
    code = ErrorCode.CACHE_ERROR


class CacheFormatError(CacheError):
    """A stored cache value could not be decoded."""

    __slots__ = ()
    code = ErrorCode.CACHE_FORMAT


class CacheTransportError(CacheError):
    """GET/SETEX against the store failed."""

    __slots__ = ()
    code = ErrorCode.CACHE_TRANSPORT
