"""
Part-year apportionment shared by every state module.

The ratio is the share of the tax year the filer lived in the state,
counted in whole days with both the move-in and move-out days included.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from calculator.decimal_math import round_cents
from models.state import ResidencyType, StateReturnConfig

logger = logging.getLogger(__name__)

DateLike = Union[date, str, None]


def _parse_date(value: DateLike) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        logger.warning("Ignoring unparseable residency date %r", value)
        return None


def compute_apportionment_ratio(config: StateReturnConfig, tax_year: int) -> float:
    """
    Full-year residents get 1.0 and nonresidents 0.0. Part-year residents get
    days in state / days in year, with dates clamped to the tax year.
    """
    if config.residency_type == ResidencyType.FULL_YEAR:
        return 1.0
    if config.residency_type == ResidencyType.NONRESIDENT:
        return 0.0

    year_start = date(tax_year, 1, 1)
    year_end = date(tax_year, 12, 31)
    days_in_year = 366 if calendar.isleap(tax_year) else 365

    start = _parse_date(config.move_in_date) or year_start
    end = _parse_date(config.move_out_date) or year_end
    start = max(start, year_start)
    end = min(end, year_end)
    if end < start:
        return 0.0

    days = (end - start).days + 1
    return min(1.0, max(0.0, days / days_in_year))


def scale_full_year_tax(full_year_tax: int, ratio: float) -> int:
    """Prorate a tax computed as if resident all year."""
    if ratio >= 1:
        return full_year_tax
    return round_cents(Decimal(full_year_tax) * Decimal(str(ratio)))


def apportion_income(amount: int, ratio: float) -> int:
    """State-source share of an income amount."""
    if ratio >= 1:
        return amount
    return round_cents(Decimal(amount) * Decimal(str(ratio)))
