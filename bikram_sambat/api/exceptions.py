"""Exception types raised by the Bikram Sambat conversion helpers."""
from __future__ import annotations

from typing import Optional, Tuple

__all__ = [
    "ApproximationRequired",
    "CalendarError",
    "DataIntegrityError",
    "InvalidDateError",
    "InvalidNumeralError",
    "YearOutOfRangeError",
]


class CalendarError(Exception):
    """Base class for every error raised by the calendar engine."""


class InvalidDateError(CalendarError, ValueError):
    """Month outside 1..12, or day outside the month's length."""


class YearOutOfRangeError(CalendarError, ValueError):
    """The requested BS year or AD date lies outside the tabulated span."""

    def __init__(self, message: str, supported: Optional[Tuple[int, int]] = None) -> None:
        super().__init__(message)
        self.supported = supported


class DataIntegrityError(CalendarError, RuntimeError):
    """The calendar table or the year cache is internally inconsistent."""


class InvalidNumeralError(CalendarError, ValueError):
    """A localized numeral string contains something other than digits."""


class ApproximationRequired(CalendarError):
    """The table cannot resolve an in-range date exactly."""

    def __init__(self, message: str, year: Optional[int] = None) -> None:
        super().__init__(message)
        self.year = year
