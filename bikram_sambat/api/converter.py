"""Gregorian ↔ Bikram Sambat conversion helpers."""
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Iterable, Optional, Tuple, Union

from .approximation import approximate_bs
from .calendar_data import MONTHS_PER_YEAR, CalendarTable, load_default_table
from .exceptions import (
    ApproximationRequired,
    DataIntegrityError,
    InvalidDateError,
    YearOutOfRangeError,
)
from .numerals import from_nepali_numerals
from .year_cache import REFERENCE_ANCHOR, ReferenceAnchor, YearCache, get_default_cache

if TYPE_CHECKING:
    from .formatting import DateFormat, Language

__all__ = [
    "BSDate",
    "BSMonth",
    "BikramSambatConverter",
    "ConversionResult",
    "Weekday",
    "bs_to_gregorian",
    "coerce_bs",
    "coerce_gregorian",
    "convert_to_bs",
    "days_in_month",
    "days_in_year",
    "get_default_converter",
    "gregorian_to_bs",
    "is_valid_bs_date",
    "supported_year_range",
]

logger = logging.getLogger(__name__)


class BSMonth(Enum):
    BAISHAKH = (1, "Baishakh", "बैशाख")
    JESTHA = (2, "Jestha", "जेठ")
    ASHADH = (3, "Ashadh", "असार")
    SHRAWAN = (4, "Shrawan", "साउन")
    BHADRA = (5, "Bhadra", "भदौ")
    ASHWIN = (6, "Ashwin", "असोज")
    KARTIK = (7, "Kartik", "कार्तिक")
    MANGSIR = (8, "Mangsir", "मंसिर")
    POUSH = (9, "Poush", "पुष")
    MAGH = (10, "Magh", "माघ")
    FALGUN = (11, "Falgun", "फाल्गुन")
    CHAITRA = (12, "Chaitra", "चैत्र")

    def __init__(self, index: int, english_name: str, nepali_name: str) -> None:
        self.index = index
        self.english_name = english_name
        self.nepali_name = nepali_name

    @classmethod
    def from_index(cls, index: int) -> "BSMonth":
        for month in cls:
            if month.index == index:
                return month
        raise InvalidDateError(f"invalid month index: {index}; must be 1-12")


class Weekday(Enum):
    """Days of the week, Sunday first as in the Nepali calendar."""

    SUNDAY = (0, "Sunday", "आइतबार", "Sun", "आइत")
    MONDAY = (1, "Monday", "सोमबार", "Mon", "सोम")
    TUESDAY = (2, "Tuesday", "मङ्गलबार", "Tue", "मङ्गल")
    WEDNESDAY = (3, "Wednesday", "बुधबार", "Wed", "बुध")
    THURSDAY = (4, "Thursday", "बिहीबार", "Thu", "बिही")
    FRIDAY = (5, "Friday", "शुक्रबार", "Fri", "शुक्र")
    SATURDAY = (6, "Saturday", "शनिबार", "Sat", "शनि")

    def __init__(self, index: int, english_name: str, nepali_name: str, short_english: str, short_nepali: str) -> None:
        self.index = index
        self.english_name = english_name
        self.nepali_name = nepali_name
        self.short_english = short_english
        self.short_nepali = short_nepali

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        return _WEEKDAYS[index % 7]

    @classmethod
    def from_gregorian(cls, value: date) -> "Weekday":
        # date.weekday() is Monday=0; shift so Sunday=0
        return _WEEKDAYS[(value.weekday() + 1) % 7]


_WEEKDAYS = tuple(Weekday)


@dataclass(frozen=True, order=True)
class BSDate:
    """A Bikram Sambat date.

    Construction does not validate; use :meth:`is_valid` or let the
    conversion functions reject impossible dates.
    """

    year: int
    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.isoformat()} BS"

    def isoformat(self, sep: str = "-") -> str:
        return f"{self.year:04d}{sep}{self.month:02d}{sep}{self.day:02d}"

    @property
    def bs_month(self) -> BSMonth:
        return BSMonth.from_index(self.month)

    @property
    def weekday(self) -> Weekday:
        return Weekday.from_gregorian(self.to_gregorian())

    def is_valid(self) -> bool:
        return is_valid_bs_date(self.year, self.month, self.day)

    def is_same_day(self, other: "BSDate") -> bool:
        return (self.year, self.month, self.day) == (other.year, other.month, other.day)

    def to_gregorian(self) -> date:
        return bs_to_gregorian(self)

    def format(self, language: Union[str, Language] = "en", fmt: Union[str, DateFormat] = "full") -> str:
        from .formatting import format_bs_date

        return format_bs_date(self, language, fmt)

    @classmethod
    def from_gregorian(cls, value: Union[str, date, datetime, Iterable[int]]) -> "BSDate":
        return gregorian_to_bs(value)

    @classmethod
    def today(cls) -> "BSDate":
        return get_default_converter().today()


@dataclass(frozen=True)
class ConversionResult:
    """A converted date together with whether it came from the estimator."""

    date: BSDate
    approximate: bool = False


class BikramSambatConverter:
    """Bidirectional converter over a month-length table.

    The table and its year cache are fixed at construction. A converter is
    immutable afterwards and can be shared between threads.
    """

    def __init__(self, table: Optional[CalendarTable] = None, anchor: ReferenceAnchor = REFERENCE_ANCHOR) -> None:
        if table is None and anchor == REFERENCE_ANCHOR:
            self.table = load_default_table()
            self.cache = get_default_cache()
        else:
            self.table = table if table is not None else load_default_table()
            self.cache = YearCache.build(self.table, anchor)
        self.anchor = anchor

    def __repr__(self) -> str:
        min_year, max_year = self.supported_year_range()
        return f"BikramSambatConverter({min_year}..{max_year}, anchor={self.anchor.ad_date.isoformat()})"

    def supported_year_range(self) -> Tuple[int, int]:
        return self.table.supported_year_range()

    @property
    def min_ad_date(self) -> date:
        return self.cache.min_ad_date

    @property
    def max_ad_date(self) -> date:
        return self.cache.max_ad_date

    def days_in_month(self, year: int, month: int) -> Optional[int]:
        return self.table.month_length(year, month)

    def days_in_year(self, year: int) -> Optional[int]:
        return self.table.year_length(year)

    def is_valid_bs_date(self, year: int, month: int, day: int) -> bool:
        month_length = self.table.month_length(year, month)
        return month_length is not None and 1 <= day <= month_length

    def _year_out_of_range(self, year: int) -> YearOutOfRangeError:
        min_year, max_year = self.supported_year_range()
        return YearOutOfRangeError(
            f"BS year {year} is outside the supported range {min_year}-{max_year}",
            supported=(min_year, max_year),
        )

    def to_ad(self, year: int, month: int, day: int) -> date:
        """Convert a BS date to its Gregorian equivalent."""

        if not (1 <= month <= MONTHS_PER_YEAR):
            raise InvalidDateError(f"month must be in 1..12, got {month}")
        min_year, max_year = self.supported_year_range()
        if not (min_year <= year <= max_year):
            raise self._year_out_of_range(year)

        entry = self.cache.entry(year)
        if entry is None:
            raise DataIntegrityError(f"no month data for BS year {year}")
        if entry.crosses_gap:
            raise DataIntegrityError(f"offset for BS year {year} spans a year missing from the table")

        month_length = entry.month_start_offsets[month] - entry.month_start_offsets[month - 1]
        if not (1 <= day <= month_length):
            raise InvalidDateError(f"day must be in 1..{month_length} for BS {year}-{month:02d}, got {day}")

        total_offset = entry.days_from_reference + entry.month_start_offsets[month - 1] + (day - 1)
        return self.anchor.ad_date + timedelta(days=total_offset)

    def to_bs(self, value: Union[date, datetime]) -> BSDate:
        """Convert a Gregorian date to BS using the table only.

        Raises :class:`ApproximationRequired` when the date is inside the
        supported span but the table cannot place it exactly.
        """

        if isinstance(value, datetime):
            value = value.date()
        if not (self.cache.nominal_min_ad_date <= value <= self.cache.nominal_max_ad_date):
            raise YearOutOfRangeError(
                f"{value.isoformat()} is outside the supported range "
                f"{self.cache.nominal_min_ad_date.isoformat()} to {self.cache.nominal_max_ad_date.isoformat()}",
                supported=self.supported_year_range(),
            )
        if not (self.min_ad_date <= value <= self.max_ad_date):
            # inside the nominal span but beyond the years the table can place
            raise ApproximationRequired(
                f"{value.isoformat()} falls in a BS year the calendar table cannot place exactly"
            )

        days_diff = (value - self.anchor.ad_date).days
        entry = self.cache.find_year(days_diff)
        if entry is None:
            raise DataIntegrityError(f"no cached year starts on or before {value.isoformat()}")
        if entry.crosses_gap:
            raise ApproximationRequired(
                f"BS year {entry.year} is past a gap in the calendar table", year=entry.year
            )

        offsets = entry.month_start_offsets
        days_into_year = days_diff - entry.days_from_reference
        if days_into_year >= entry.length:
            raise ApproximationRequired(f"{value.isoformat()} falls in a gap after BS year {entry.year}")

        # half-open [start, end) per month: a month's first day belongs to it
        month = bisect_right(offsets, days_into_year)
        day = days_into_year - offsets[month - 1] + 1

        month_length = self.table.month_length(entry.year, month)
        if month_length is None or not (1 <= day <= month_length):
            raise DataIntegrityError(
                f"computed BS {entry.year}-{month:02d}-{day:02d} for {value.isoformat()} is not a valid date"
            )
        return BSDate(entry.year, month, day)

    def convert_to_bs(self, value: Union[date, datetime]) -> ConversionResult:
        """Like :meth:`to_bs`, falling back to the estimator for table gaps."""

        try:
            return ConversionResult(self.to_bs(value))
        except ApproximationRequired as exc:
            if isinstance(value, datetime):
                value = value.date()
            estimate = BSDate(*approximate_bs(value, self.table))
            logger.debug("Approximated %s as %s: %s", value.isoformat(), estimate, exc)
            return ConversionResult(estimate, approximate=True)

    def today(self) -> BSDate:
        return self.to_bs(date.today())


@lru_cache(maxsize=1)
def get_default_converter() -> BikramSambatConverter:
    return BikramSambatConverter()


def _resolve(converter: Optional[BikramSambatConverter]) -> BikramSambatConverter:
    return converter if converter is not None else get_default_converter()


def coerce_gregorian(value: Union[str, date, datetime, Iterable[int]]) -> Tuple[int, int, int]:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.year, value.month, value.day
    if isinstance(value, str):
        tokens = value.strip().replace("/", "-").split("-")
        if len(tokens) != 3:
            raise ValueError(f"Unsupported Gregorian date string: {value!r}")
        return tuple(int(part) for part in tokens)  # type: ignore[return-value]
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a date, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def coerce_bs(value: Union[str, BSDate, Iterable[int]]) -> Tuple[int, int, int]:
    if isinstance(value, BSDate):
        return value.year, value.month, value.day
    if isinstance(value, str):
        tokens = value.strip().replace("/", "-").split("-")
        if len(tokens) != 3:
            raise ValueError(f"Unsupported BS date string: {value!r}")
        # accepts both ASCII and Devanagari digits
        return tuple(from_nepali_numerals(part) for part in tokens)  # type: ignore[return-value]
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a BSDate, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def gregorian_to_bs(
    value: Union[str, date, datetime, Iterable[int]],
    converter: Optional[BikramSambatConverter] = None,
) -> BSDate:
    gy, gm, gd = coerce_gregorian(value)
    return _resolve(converter).to_bs(date(gy, gm, gd))


def convert_to_bs(
    value: Union[str, date, datetime, Iterable[int]],
    converter: Optional[BikramSambatConverter] = None,
) -> ConversionResult:
    gy, gm, gd = coerce_gregorian(value)
    return _resolve(converter).convert_to_bs(date(gy, gm, gd))


def bs_to_gregorian(
    value: Union[str, BSDate, Iterable[int]],
    converter: Optional[BikramSambatConverter] = None,
) -> date:
    year, month, day = coerce_bs(value)
    return _resolve(converter).to_ad(year, month, day)


def is_valid_bs_date(year: int, month: int, day: int, converter: Optional[BikramSambatConverter] = None) -> bool:
    return _resolve(converter).is_valid_bs_date(year, month, day)


def days_in_month(year: int, month: int, converter: Optional[BikramSambatConverter] = None) -> Optional[int]:
    return _resolve(converter).days_in_month(year, month)


def days_in_year(year: int, converter: Optional[BikramSambatConverter] = None) -> Optional[int]:
    return _resolve(converter).days_in_year(year)


def supported_year_range(converter: Optional[BikramSambatConverter] = None) -> Tuple[int, int]:
    return _resolve(converter).supported_year_range()
