"""Checked u64 arithmetic for pools, shares and payouts.

All stakes, pools and share counts are unsigned 64-bit integers. Python ints
never wrap, so every result is range-checked instead; products are formed in
a widened intermediate and only the final value must fit.
"""

from src.pm_common.errors import ArithmeticOverflowError

U64_MAX = (1 << 64) - 1


def ensure_u64(value: int, what: str = "value") -> int:
    """Return value unchanged, or raise ArithmeticOverflowError if outside [0, U64_MAX]."""
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{what} out of u64 range: {value}")
    return value


def checked_add(a: int, b: int, what: str = "sum") -> int:
    return ensure_u64(a + b, what)


def checked_mul(a: int, b: int, what: str = "product") -> int:
    return ensure_u64(a * b, what)


def mul_div_floor(a: int, b: int, divisor: int, what: str = "result") -> int:
    """floor(a * b / divisor) with a widened intermediate; the quotient must fit u64."""
    if divisor <= 0:
        raise ZeroDivisionError("divisor must be positive")
    return ensure_u64((a * b) // divisor, what)
