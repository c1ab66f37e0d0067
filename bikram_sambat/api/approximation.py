"""Best-effort BS estimate for dates the month-length table cannot resolve."""
from __future__ import annotations

from datetime import date
from typing import Tuple

from .calendar_data import MONTHS_PER_YEAR, CalendarTable

__all__ = [
    "AVERAGE_BS_YEAR_DAYS",
    "BS_ERA_OFFSET_YEARS",
    "approximate_bs",
]

# Mean BS year length (sidereal solar year) in days.
AVERAGE_BS_YEAR_DAYS = 365.2564
# BS year N starts around 13-14 April of AD year N - 57, i.e. roughly
# 0.28 of the way into the AD year. Heuristic; replace if a better fit exists.
BS_ERA_OFFSET_YEARS = 56.71
_FALLBACK_MONTH_LENGTH = 30


def _fractional_year(value: date) -> float:
    start = date(value.year, 1, 1)
    days_in_year = (date(value.year + 1, 1, 1) - start).days
    return value.year + (value - start).days / days_in_year


def approximate_bs(value: date, table: CalendarTable) -> Tuple[int, int, int]:
    """Estimate the BS (year, month, day) for ``value`` without consulting year offsets.

    The result is clamped into the table's year range and into the month's
    length when the table knows it. Callers must mark it as approximate.
    """

    bs_position = _fractional_year(value) + BS_ERA_OFFSET_YEARS
    year = int(bs_position)
    days_into_year = (bs_position - year) * AVERAGE_BS_YEAR_DAYS
    average_month = AVERAGE_BS_YEAR_DAYS / MONTHS_PER_YEAR
    month = int(days_into_year // average_month) + 1
    day = int(days_into_year - (month - 1) * average_month) + 1

    min_year, max_year = table.supported_year_range()
    year = min(max(year, min_year), max_year)
    month = min(max(month, 1), MONTHS_PER_YEAR)
    month_length = table.month_length(year, month) or _FALLBACK_MONTH_LENGTH
    day = min(max(day, 1), month_length)
    return year, month, day
