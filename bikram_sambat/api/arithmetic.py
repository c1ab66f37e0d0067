"""Date arithmetic on Bikram Sambat dates.

Day-based arithmetic goes through the Gregorian calendar because BS month
boundaries are irregular. Month and year arithmetic works on the BS fields
and clamps the day to the target month, the way most calendars treat the
31st of a month that is followed by a shorter one.
"""
from __future__ import annotations

from bisect import bisect_right
from datetime import date, timedelta
from typing import Optional, Union

from .calendar_data import MONTHS_PER_YEAR
from .converter import BikramSambatConverter, BSDate, Weekday, coerce_bs, get_default_converter
from .exceptions import DataIntegrityError, InvalidDateError, YearOutOfRangeError
from .year_cache import YearCacheEntry

__all__ = [
    "add_days",
    "add_months",
    "add_years",
    "age",
    "day_of_year",
    "days_between",
    "days_for_month",
    "first_weekday_of_month",
    "from_day_of_year",
    "weekday",
]

BSLike = Union[BSDate, str, tuple]


def _converter(converter: Optional[BikramSambatConverter]) -> BikramSambatConverter:
    return converter if converter is not None else get_default_converter()


def _as_bs(value: BSLike) -> BSDate:
    if isinstance(value, BSDate):
        return value
    return BSDate(*coerce_bs(value))


def _year_entry(conv: BikramSambatConverter, year: int) -> YearCacheEntry:
    min_year, max_year = conv.supported_year_range()
    if not (min_year <= year <= max_year):
        raise YearOutOfRangeError(
            f"BS year {year} is outside the supported range {min_year}-{max_year}",
            supported=(min_year, max_year),
        )
    entry = conv.cache.entry(year)
    if entry is None:
        raise DataIntegrityError(f"no month data for BS year {year}")
    return entry


def _month_length(conv: BikramSambatConverter, year: int, month: int) -> int:
    if not (1 <= month <= MONTHS_PER_YEAR):
        raise InvalidDateError(f"month must be in 1..12, got {month}")
    entry = _year_entry(conv, year)
    return entry.month_start_offsets[month] - entry.month_start_offsets[month - 1]


def _validate(conv: BikramSambatConverter, value: BSDate) -> None:
    length = _month_length(conv, value.year, value.month)
    if not (1 <= value.day <= length):
        raise InvalidDateError(f"day must be in 1..{length} for BS {value.year}-{value.month:02d}, got {value.day}")


def days_between(start: BSLike, end: BSLike, *, converter: Optional[BikramSambatConverter] = None) -> int:
    """Signed number of days from ``start`` to ``end``."""

    conv = _converter(converter)
    first, second = _as_bs(start), _as_bs(end)
    return (conv.to_ad(second.year, second.month, second.day) - conv.to_ad(first.year, first.month, first.day)).days


def add_days(value: BSLike, days: int, *, converter: Optional[BikramSambatConverter] = None) -> BSDate:
    conv = _converter(converter)
    bs = _as_bs(value)
    shifted: date = conv.to_ad(bs.year, bs.month, bs.day) + timedelta(days=days)
    return conv.to_bs(shifted)


def add_months(value: BSLike, months: int, *, converter: Optional[BikramSambatConverter] = None) -> BSDate:
    conv = _converter(converter)
    bs = _as_bs(value)
    _validate(conv, bs)
    year, month_index = divmod(bs.year * MONTHS_PER_YEAR + (bs.month - 1) + months, MONTHS_PER_YEAR)
    month = month_index + 1
    return BSDate(year, month, min(bs.day, _month_length(conv, year, month)))


def add_years(value: BSLike, years: int, *, converter: Optional[BikramSambatConverter] = None) -> BSDate:
    conv = _converter(converter)
    bs = _as_bs(value)
    _validate(conv, bs)
    year = bs.year + years
    return BSDate(year, bs.month, min(bs.day, _month_length(conv, year, bs.month)))


def day_of_year(value: BSLike, *, converter: Optional[BikramSambatConverter] = None) -> int:
    """1-based position of the date within its BS year."""

    conv = _converter(converter)
    bs = _as_bs(value)
    _validate(conv, bs)
    entry = _year_entry(conv, bs.year)
    return entry.month_start_offsets[bs.month - 1] + bs.day


def from_day_of_year(year: int, ordinal: int, *, converter: Optional[BikramSambatConverter] = None) -> BSDate:
    conv = _converter(converter)
    entry = _year_entry(conv, year)
    if not (1 <= ordinal <= entry.length):
        raise InvalidDateError(f"day of year must be in 1..{entry.length} for BS {year}, got {ordinal}")
    offsets = entry.month_start_offsets
    month = bisect_right(offsets, ordinal - 1)
    return BSDate(year, month, ordinal - offsets[month - 1])


def weekday(value: BSLike, *, converter: Optional[BikramSambatConverter] = None) -> Weekday:
    conv = _converter(converter)
    bs = _as_bs(value)
    return Weekday.from_gregorian(conv.to_ad(bs.year, bs.month, bs.day))


def first_weekday_of_month(year: int, month: int, *, converter: Optional[BikramSambatConverter] = None) -> int:
    """Weekday index (0 = Sunday) of the month's first day, for grid layout."""

    return weekday(BSDate(year, month, 1), converter=converter).index


def days_for_month(year: int, month: int, *, converter: Optional[BikramSambatConverter] = None) -> range:
    return range(1, _month_length(_converter(converter), year, month) + 1)


def age(
    birth: BSLike,
    reference: Optional[BSLike] = None,
    *,
    converter: Optional[BikramSambatConverter] = None,
) -> int:
    """Completed BS years between ``birth`` and ``reference`` (default today)."""

    conv = _converter(converter)
    born = _as_bs(birth)
    _validate(conv, born)
    if reference is None:
        on = conv.today()
    else:
        on = _as_bs(reference)
        _validate(conv, on)

    years = on.year - born.year
    if (on.month, on.day) < (born.month, born.day):
        years -= 1
    return max(years, 0)
