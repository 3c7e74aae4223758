"""Foundation layer: configuration and errors."""

from .config import FibSettings, get_settings
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
    "FibSettings", "get_settings",
    "ErrorCode", "ErrorResponse", "FibonacciError",
    "ParseError", "NumericalInstabilityError",
    "CacheError", "CacheFormatError", "CacheTransportError",
]
