"""
Decimal Math Utilities for Tax Calculations.

Every monetary amount in the engine is an integer number of cents.
Intermediate products (amount x rate, amount x ratio) are carried as
Decimal and rounded back to whole cents with ROUND_HALF_UP, which is
round-half-away-from-zero for negative values as well.

Why Decimal?
- Float: 0.1 + 0.2 = 0.30000000000000004
- Decimal: 0.1 + 0.2 = 0.3

Rounding happens at each worksheet line, never deferred to the total.
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_CEILING, ROUND_FLOOR
from typing import Union
import logging

logger = logging.getLogger(__name__)

# Type alias for values that can be converted to Decimal
Numeric = Union[int, float, str, Decimal]

WHOLE_CENTS = Decimal("1")
CENTS_PER_DOLLAR = 100


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Examples:
        >>> to_decimal(100)
        Decimal('100')
        >>> to_decimal(0.0495)
        Decimal('0.0495')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Convert float to string first to preserve representation
        return Decimal(str(value))
    return Decimal(value)


def round_cents(value: Numeric) -> int:
    """
    Round a cent-denominated value to a whole cent, half away from zero.

    Examples:
        >>> round_cents(Decimal("119250.5"))
        119251
        >>> round_cents(Decimal("-0.5"))
        -1
    """
    return int(to_decimal(value).quantize(WHOLE_CENTS, rounding=ROUND_HALF_UP))


def cents(dollars: Numeric) -> int:
    """
    Convert a dollar amount to integer cents.

    Examples:
        >>> cents(11925)
        1192500
        >>> cents("0.01")
        1
    """
    return round_cents(to_decimal(dollars) * CENTS_PER_DOLLAR)


def to_dollars(amount_cents: int) -> Decimal:
    """Cents to a two-place Decimal dollar amount (display only)."""
    return (Decimal(amount_cents) / CENTS_PER_DOLLAR).quantize(Decimal("0.01"))


def format_dollars(amount_cents: int) -> str:
    """
    Examples:
        >>> format_dollars(691400)
        '$6,914.00'
        >>> format_dollars(-150000)
        '-$1,500.00'
    """
    sign = "-" if amount_cents < 0 else ""
    return f"{sign}${abs(to_dollars(amount_cents)):,.2f}"


def apply_rate(amount_cents: int, rate: Numeric) -> int:
    """amount x rate, rounded to the cent."""
    return round_cents(to_decimal(amount_cents) * to_decimal(rate))


def prorate(amount_cents: int, numerator: Numeric, denominator: Numeric) -> int:
    """
    amount x numerator / denominator, rounded once at the end.

    Returns 0 when the denominator is zero.
    """
    den = to_decimal(denominator)
    if den == 0:
        return 0
    return round_cents(to_decimal(amount_cents) * to_decimal(numerator) / den)


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer ceiling division (e.g. 'each $1,000 or fraction thereof')."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return int((Decimal(numerator) / Decimal(denominator)).to_integral_value(rounding=ROUND_CEILING))


def floor_div(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return int((Decimal(numerator) / Decimal(denominator)).to_integral_value(rounding=ROUND_FLOOR))


def clamp(value, minimum, maximum):
    """
    Clamp a value between minimum and maximum.

    Examples:
        >>> clamp(150, 0, 100)
        100
        >>> clamp(-50, 0, 100)
        0
    """
    return max(minimum, min(value, maximum))


def phase_out_fraction(amount: int, start: int, end: int) -> Decimal:
    """
    Linear phase-out fraction in [0, 1].

    0 at or below ``start``, 1 at or above ``end``. A degenerate range
    (start >= end) is treated as fully phased out.
    """
    if start >= end:
        return Decimal(1)
    if amount <= start:
        return Decimal(0)
    if amount >= end:
        return Decimal(1)
    return Decimal(amount - start) / Decimal(end - start)
