"""Credit card billing-cycle date arithmetic.

A statement for (year, month) closes on the configured closing day of that
month and opens on the closing day of the previous month; both bounds are
inclusive. A closing or due day beyond the month's length is clamped to the
month's last day (31 -> 30 in April, -> 28/29 in February).
"""

from __future__ import annotations

import calendar
from datetime import date

from ..core.errors import InvalidBillingParameters
from .types import StatementPeriod


def _require_day(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
        raise InvalidBillingParameters(f"{name} must be an integer between 1 and 31, got {value!r}")


def require_month(year: int, month: int) -> None:
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidBillingParameters(f"month must be an integer between 1 and 12, got {month!r}")
    if isinstance(year, bool) or not isinstance(year, int) or not date.min.year <= year <= date.max.year:
        raise InvalidBillingParameters(f"year out of range: {year!r}")


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def clamp_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, last_day_of_month(year, month)))


def compute_statement_period(closing_day: int, year: int, month: int) -> StatementPeriod:
    _require_day("closing_day", closing_day)
    require_month(year, month)
    if (year, month) == (date.min.year, 1):
        # the period opens in the previous December
        raise InvalidBillingParameters("no statement period before January of year 1")
    prev_year, prev_month = previous_month(year, month)
    return StatementPeriod(
        start=clamp_day(prev_year, prev_month, closing_day),
        end=clamp_day(year, month, closing_day),
    )


def compute_due_date(due_day: int, year: int, month: int) -> date:
    _require_day("due_day", due_day)
    require_month(year, month)
    return clamp_day(year, month, due_day)
