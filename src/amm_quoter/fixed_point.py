"""Ledger-native fixed-point arithmetic.

Values are plain Python integers scaled by ``UNIT`` (18 fractional digits).
Black-Scholes internals run on ``PRECISE_UNIT`` (27 fractional digits) so that
truncation does not accumulate across iterations.

Rounding rules mirror the exchange's decimal math library:

- ``multiply_decimal`` / ``divide_decimal`` truncate toward zero.
- ``*_round`` variants compute one extra digit and round half up on it
  (toward zero for negative operands, exactly like signed integer division).

Every result is range-checked against the 256-bit word the ledger stores.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal, localcontext

DECIMALS = 18
PRECISE_DECIMALS = 27

UNIT = 10**DECIMALS
PRECISE_UNIT = 10**PRECISE_DECIMALS
UNIT_TO_PRECISE_FACTOR = 10 ** (PRECISE_DECIMALS - DECIMALS)

UINT256_MAX = 2**256 - 1
INT256_MIN = -(2**255)
INT256_MAX = 2**255 - 1

# Working precision for transcendental functions on precise values.
_CONTEXT_PRECISION = 60


class FixedPointOverflowError(ArithmeticError):
    """Raised when a fixed-point result does not fit a 256-bit word."""


def checked(value: int, *, signed: bool = True) -> int:
    """Return ``value`` unchanged if it fits int256 (or uint256 when unsigned)."""
    if signed:
        if not INT256_MIN <= value <= INT256_MAX:
            raise FixedPointOverflowError(f"int256 overflow: {value}")
    elif not 0 <= value <= UINT256_MAX:
        raise FixedPointOverflowError(f"uint256 overflow: {value}")
    return value


def _div_trunc(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    if b == 0:
        raise ZeroDivisionError("fixed-point division by zero")
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _round_tenth(quotient_times_ten: int) -> int:
    # Remainder takes the sign of the dividend, so negatives truncate.
    remainder = abs(quotient_times_ten) % 10
    if quotient_times_ten >= 0 and remainder >= 5:
        quotient_times_ten += 10
    return _div_trunc(quotient_times_ten, 10)


def multiply_decimal(x: int, y: int, unit: int = UNIT) -> int:
    return checked(_div_trunc(checked(x * y), unit))


def multiply_decimal_round(x: int, y: int, unit: int = UNIT) -> int:
    return checked(_round_tenth(_div_trunc(checked(x * y), unit // 10)))


def divide_decimal(x: int, y: int, unit: int = UNIT) -> int:
    return checked(_div_trunc(checked(x * unit), y))


def divide_decimal_round(x: int, y: int, unit: int = UNIT) -> int:
    return checked(_round_tenth(_div_trunc(checked(x * unit * 10), y)))


def multiply_decimal_round_precise(x: int, y: int) -> int:
    return multiply_decimal_round(x, y, PRECISE_UNIT)


def divide_decimal_round_precise(x: int, y: int) -> int:
    return divide_decimal_round(x, y, PRECISE_UNIT)


def decimal_to_precise(x: int) -> int:
    return checked(x * UNIT_TO_PRECISE_FACTOR)


def precise_to_decimal(x: int) -> int:
    """Scale a precise value down to ``UNIT``, rounding half up."""
    return checked(_round_tenth(_div_trunc(x, UNIT_TO_PRECISE_FACTOR // 10)))


def to_fixed(value: str | int | float | Decimal, unit: int = UNIT) -> int:
    """Parse a human-readable number into a fixed-point integer.

    Digits beyond the unit's scale are truncated. Floats go through ``str`` so
    ``0.9`` parses as ``0.9`` and not its binary expansion.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not fixed-point values")
    if isinstance(value, float):
        value = str(value)
    try:
        dec = Decimal(value)
    except ArithmeticError as exc:
        raise ValueError(f"not a decimal number: {value!r}") from exc
    if not dec.is_finite():
        raise ValueError(f"fixed-point values must be finite, got {value!r}")
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION + 20
        scaled = (dec * unit).to_integral_value(rounding=ROUND_DOWN)
    return checked(int(scaled))


def from_fixed(value: int, unit: int = UNIT) -> Decimal:
    """Convert a fixed-point integer into an exact ``Decimal``."""
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION + 20
        return Decimal(value) / Decimal(unit)


def _precise_from_decimal(dec: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION + 20
        return checked(int((dec * PRECISE_UNIT).to_integral_value(ROUND_HALF_EVEN)))


def exp_precise(x: int) -> int:
    """``e**x`` for a signed precise value."""
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION
        result = (Decimal(x) / PRECISE_UNIT).exp()
    return _precise_from_decimal(result)


def ln_precise(x: int) -> int:
    """Natural log of a strictly positive precise value."""
    if x <= 0:
        raise ValueError("ln is only defined for positive values")
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION
        result = (Decimal(x) / PRECISE_UNIT).ln()
    return _precise_from_decimal(result)


def sqrt_precise(x: int) -> int:
    """Square root of a non-negative precise value."""
    if x < 0:
        raise ValueError("sqrt is only defined for non-negative values")
    with localcontext() as ctx:
        ctx.prec = _CONTEXT_PRECISION
        result = (Decimal(x) / PRECISE_UNIT).sqrt()
    return _precise_from_decimal(result)
