"""Unified error handling for complexfib.

- ErrorCode: machine-readable error codes
- FibonacciError and subclasses: the exception taxonomy
- ErrorResponse: JSON error body
"""

from .errors import (
    CacheError,
    CacheFormatError,
    CacheTransportError,
    ErrorCode,
    ErrorResponse,
    FibonacciError,
    NumericalInstabilityError,
    ParseError,
)

__all__ = [
    "ErrorCode", "ErrorResponse", "FibonacciError",
    "ParseError", "NumericalInstabilityError",
    "CacheError", "CacheFormatError", "CacheTransportError",
]
