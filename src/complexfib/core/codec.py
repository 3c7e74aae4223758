"""Textual encodings of complex values.

Two renderings share one fixed-point primitive:

    display   "R±Ii"   sign of the imaginary part forced, magnitude shown
    cache     "R I"    raw components, space separated

Both write exactly negative zero as the literal ``-0.0000000000000000``.
The cache rendering is also the cache key body, so it must stay stable.

Example:
    >>> format_display(parse_input("3+4"))
    '3.0000000000000000+4.0000000000000000i'
    >>> format_for_cache(complex(-0.0, 2.5))
    '-0.0000000000000000 2.5000000000000000'
"""

from __future__ import annotations

import math
import re
from decimal import Decimal

from complexfib.foundation.errors import CacheFormatError, ParseError

__all__ = [
    "DEFAULT_KEY_PREFIX",
    "DIGITS",
    "NEGATIVE_ZERO",
    "cache_key",
    "format_display",
    "format_fixed",
    "format_for_cache",
    "is_negative_zero",
    "parse_from_cache",
    "parse_input",
]

DIGITS = 16
NEGATIVE_ZERO = "-0." + "0" * DIGITS
DEFAULT_KEY_PREFIX = "fib:"

# Plain decimal with optional exponent; no inf/nan, underscores or hex
_NUMBER = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE]-?[0-9]+)?")


def is_negative_zero(x: float) -> bool:
    """True only for the IEEE-754 value -0.0."""
    return x == 0.0 and math.copysign(1.0, x) < 0


def format_fixed(x: float, *, exact: bool = False) -> str:
    """Fixed-point with 16 fractional digits, negative zero as a literal.

    With ``exact=True`` the expansion is lengthened to the shortest digits that
    reproduce ``x`` when 16 fractional digits would lose bits (magnitudes
    below one mostly). Scientific notation is never produced.
    """
    if is_negative_zero(x):
        return NEGATIVE_ZERO
    text = f"{x:.{DIGITS}f}"
    if exact and math.isfinite(x) and float(text) != x:
        text = format(Decimal(repr(x)), "f")
    return text


# ─────────────────────────────────────────────────────────────────────────────
# Display form
# ─────────────────────────────────────────────────────────────────────────────


def format_display(z: complex) -> str:
    """Render ``z`` as ``R±Ii`` for responses and logs."""
    sign = "+" if z.imag >= 0 else "-"
    # abs() never yields -0.0, the literal branch in format_fixed stays inert here
    return f"{format_fixed(z.real)}{sign}{format_fixed(abs(z.imag))}i"


def parse_input(raw: str) -> complex:
    """Parse user input into a complex value.

    ``,`` is accepted as decimal separator and ``+`` separates components, so
    ``"3+4"``, ``"3 4"`` and ``"3,0 4"`` are all 3+4i. One token is a real
    number, two tokens are real and imaginary parts.

    Raises:
        ParseError: non-numeric token or not one/two components
    """
    tokens = raw.replace(",", ".").replace("+", " ").split()
    if not all(_NUMBER.fullmatch(t) for t in tokens):
        raise ParseError(f"invalid number format: {raw!r}")
    values = [float(t) for t in tokens]

    match values:
        case [real]:
            return complex(real, 0.0)
        case [real, imag]:
            return complex(real, imag)
        case _:
            raise ParseError(f"unsupported number of components: expected 1 or 2, got {len(values)}")


# ─────────────────────────────────────────────────────────────────────────────
# Cache form
# ─────────────────────────────────────────────────────────────────────────────


def format_for_cache(z: complex) -> str:
    """Render ``z`` as ``R I`` for storage; lossless for finite values."""
    return f"{format_fixed(z.real, exact=True)} {format_fixed(z.imag, exact=True)}"


def _parse_component(token: str, cached: str) -> float:
    if token == NEGATIVE_ZERO:
        return -0.0
    try:
        value = float(token)
    except ValueError as e:
        raise CacheFormatError(f"invalid cached component {token!r} in {cached!r}") from e
    if not math.isfinite(value):
        raise CacheFormatError(f"non-finite cached component {token!r} in {cached!r}")
    return value


def parse_from_cache(cached: str) -> complex:
    """Decode a value written by :func:`format_for_cache`.

    Raises:
        CacheFormatError: not exactly two space-separated finite numbers
    """
    parts = cached.split(" ")
    if len(parts) != 2:
        raise CacheFormatError(f"invalid cache format: {cached!r}")
    return complex(_parse_component(parts[0], cached), _parse_component(parts[1], cached))


def cache_key(z: complex, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Cache key for input ``z`` (memo of input -> result)."""
    return f"{prefix}{format_for_cache(z)}"
