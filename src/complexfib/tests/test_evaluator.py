"""Tests for the closed-form evaluator."""

from __future__ import annotations

import math

import pytest

from complexfib.core import INV_SQRT_5, LOG_PHI, LOG_PSI, evaluate, is_finite
from complexfib.foundation.errors import ErrorCode, NumericalInstabilityError


def _fib(n: int) -> int:
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


def test_constants() -> None:
    phi = (1 + math.sqrt(5)) / 2
    assert INV_SQRT_5 == complex(1 / math.sqrt(5), 0)
    assert LOG_PHI.real == pytest.approx(math.log(phi))
    assert LOG_PHI.imag == 0.0
    # log of a negative real lands on the principal branch
    assert LOG_PSI.real == pytest.approx(math.log(phi - 1))
    assert LOG_PSI.imag == pytest.approx(math.pi)


def test_fifth_fibonacci_number() -> None:
    result = evaluate(complex(5, 0))
    assert result.real == pytest.approx(5.0, abs=1e-12)
    assert result.imag == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("n", [0, 1, 2, 3, 10, 20, 30, 50])
def test_integer_indices_match_sequence(n: int) -> None:
    result = evaluate(complex(n, 0))
    assert result.real == pytest.approx(_fib(n), rel=1e-12, abs=1e-12)
    assert result.imag == pytest.approx(0.0, abs=1e-9)


@pytest.mark.parametrize(("n", "expected"), [(-1, 1), (-2, -1), (-3, 2), (-4, -3), (-8, -21)])
def test_negative_indices(n: int, expected: int) -> None:
    assert evaluate(complex(n, 0)).real == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize("z", [complex(0.5, 0.3), complex(-2.25, 1.75), complex(3, -4)])
def test_recurrence_holds_off_the_integers(z: complex) -> None:
    lhs = evaluate(z + 2)
    rhs = evaluate(z + 1) + evaluate(z)
    assert abs(lhs - rhs) <= 1e-9 * max(1.0, abs(rhs))


def test_complex_index_has_imaginary_part() -> None:
    assert evaluate(complex(0.5, 0)).imag != 0.0
    assert is_finite(evaluate(complex(3, 4)))


@pytest.mark.parametrize(
    "z",
    [
        complex(1e6, 0),
        complex(-1e6, 0),
        complex(2000, 3),
        complex(1e308, 1e308),
        complex(math.nan, 0),
        complex(math.inf, 0),
    ],
)
def test_overflow_is_reported_not_returned(z: complex) -> None:
    with pytest.raises(NumericalInstabilityError) as exc_info:
        evaluate(z)
    assert str(exc_info.value) == "Numerical instability in Fibonacci computation"
    assert exc_info.value.code is ErrorCode.NUMERICAL_INSTABILITY
