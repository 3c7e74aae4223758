"""Closed-form Fibonacci over the complex plane.

Binet's formula F(z) = (phi**z - psi**z) / sqrt(5), written with complex
logarithms so it is defined for any complex z:

    F(z) = (exp(z * log(phi)) - exp(z * log(psi))) * (1 / sqrt(5))

psi is negative, so log(psi) takes the principal branch with imaginary part
pi. For integer z this reduces to the usual Fibonacci numbers up to rounding.
"""

from __future__ import annotations

import cmath
import math

from complexfib.foundation.errors import NumericalInstabilityError

__all__ = ["INV_SQRT_5", "LOG_PHI", "LOG_PSI", "evaluate", "is_finite"]

_SQRT_5 = math.sqrt(5)

# Read-only after import; shared by every worker thread.
INV_SQRT_5: complex = complex(1 / _SQRT_5, 0.0)
LOG_PHI: complex = cmath.log(complex((1 + _SQRT_5) / 2, 0.0))
LOG_PSI: complex = cmath.log(complex((1 - _SQRT_5) / 2, 0.0))


def is_finite(z: complex) -> bool:
    """Neither component is NaN or infinite."""
    return cmath.isfinite(z)


def evaluate(z: complex) -> complex:
    """Fibonacci function at ``z``.

    Raises:
        NumericalInstabilityError: the exponential overflowed or the result
            has a NaN/infinite component
    """
    try:
        result = (cmath.exp(z * LOG_PHI) - cmath.exp(z * LOG_PSI)) * INV_SQRT_5
    except (OverflowError, ValueError) as e:
        # cmath raises where a naive exp would return inf
        raise NumericalInstabilityError() from e
    if not is_finite(result):
        raise NumericalInstabilityError()
    return result
