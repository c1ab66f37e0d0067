"""Localized rendering of BS and AD dates."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

from .converter import BikramSambatConverter, BSDate, BSMonth, Weekday, get_default_converter
from .exceptions import ApproximationRequired, InvalidDateError, YearOutOfRangeError
from .numerals import pad_nepali, to_nepali_numerals

__all__ = [
    "DateFormat",
    "DateSystem",
    "Language",
    "format_ad_date",
    "format_bs_date",
    "format_date",
    "format_date_range",
    "month_names",
    "weekday_names",
]

_AD_MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Language(Enum):
    ENGLISH = ("en", "English", "English")
    NEPALI = ("ne", "नेपाली", "Nepali")

    def __init__(self, code: str, native_name: str, english_name: str) -> None:
        self.code = code
        self.native_name = native_name
        self.english_name = english_name

    @classmethod
    def default(cls) -> "Language":
        return cls.ENGLISH

    @classmethod
    def from_code(cls, code: Union[str, "Language", None]) -> "Language":
        """Look up a language by ISO 639-1 code, falling back to English."""

        if isinstance(code, Language):
            return code
        normalized = (code or "").strip().lower()
        for language in cls:
            if language.code == normalized:
                return language
        return cls.default()


class DateSystem(Enum):
    AD = ("ad", "AD (Gregorian)", "ई.स. (ग्रेगोरियन)")
    BS = ("bs", "BS (Bikram Sambat)", "वि.सं. (विक्रम सम्वत्)")

    def __init__(self, code: str, display_name_en: str, display_name_ne: str) -> None:
        self.code = code
        self.display_name_en = display_name_en
        self.display_name_ne = display_name_ne

    def display_name(self, language: Union[str, Language] = Language.ENGLISH) -> str:
        if Language.from_code(language) is Language.NEPALI:
            return self.display_name_ne
        return self.display_name_en

    @classmethod
    def default(cls) -> "DateSystem":
        return cls.AD

    @classmethod
    def from_code(cls, code: Union[str, "DateSystem", None]) -> "DateSystem":
        if isinstance(code, DateSystem):
            return code
        normalized = (code or "").strip().lower()
        for system in cls:
            if system.code == normalized:
                return system
        return cls.default()


class DateFormat(Enum):
    FULL = "full"  # 2081 Magh 15
    SHORT = "short"  # 2081-10-15
    MONTH_YEAR = "month_year"  # Magh 2081
    YEAR_ONLY = "year_only"  # 2081
    DAY_MONTH = "day_month"  # 15 Magh
    FULL_WITH_WEEKDAY = "full_with_weekday"  # Sunday, 2081 Magh 15

    @classmethod
    def coerce(cls, value: Union[str, "DateFormat"]) -> "DateFormat":
        if isinstance(value, DateFormat):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"format must be one of: {choices}") from exc


def month_names(language: Union[str, Language] = Language.ENGLISH) -> List[str]:
    nepali = Language.from_code(language) is Language.NEPALI
    return [month.nepali_name if nepali else month.english_name for month in BSMonth]


def weekday_names(language: Union[str, Language] = Language.ENGLISH, short: bool = False) -> List[str]:
    nepali = Language.from_code(language) is Language.NEPALI
    names = []
    for day in Weekday:
        if nepali:
            names.append(day.short_nepali if short else day.nepali_name)
        else:
            names.append(day.short_english if short else day.english_name)
    return names


def _weekday_name(value: Weekday, language: Language) -> str:
    return value.nepali_name if language is Language.NEPALI else value.english_name


def format_bs_date(
    value: BSDate,
    language: Union[str, Language] = Language.ENGLISH,
    fmt: Union[str, DateFormat] = DateFormat.FULL,
    *,
    converter: Optional[BikramSambatConverter] = None,
) -> str:
    lang = Language.from_code(language)
    style = DateFormat.coerce(fmt)
    conv = converter if converter is not None else get_default_converter()
    month = BSMonth.from_index(value.month)
    if not conv.is_valid_bs_date(value.year, value.month, value.day):
        raise InvalidDateError(f"{value.isoformat()} is not a valid BS date")

    if lang is Language.NEPALI:
        year, day, month_name = to_nepali_numerals(value.year), to_nepali_numerals(value.day), month.nepali_name
    else:
        year, day, month_name = str(value.year), str(value.day), month.english_name

    if style is DateFormat.FULL:
        return f"{year} {month_name} {day}"
    if style is DateFormat.SHORT:
        if lang is Language.NEPALI:
            return f"{year}-{pad_nepali(value.month)}-{pad_nepali(value.day)}"
        return f"{value.year}-{value.month:02d}-{value.day:02d}"
    if style is DateFormat.MONTH_YEAR:
        return f"{month_name} {year}"
    if style is DateFormat.YEAR_ONLY:
        return year
    if style is DateFormat.DAY_MONTH:
        return f"{day} {month_name}"

    weekday = Weekday.from_gregorian(conv.to_ad(value.year, value.month, value.day))
    return f"{_weekday_name(weekday, lang)}, {year} {month_name} {day}"


def format_ad_date(
    value: Union[date, datetime],
    language: Union[str, Language] = Language.ENGLISH,
    fmt: Union[str, DateFormat] = DateFormat.FULL,
) -> str:
    lang = Language.from_code(language)
    style = DateFormat.coerce(fmt)
    if isinstance(value, datetime):
        value = value.date()
    month = _AD_MONTH_ABBREVIATIONS[value.month - 1]

    if style is DateFormat.FULL:
        formatted = f"{value.year:04d} {month} {value.day}"
    elif style is DateFormat.SHORT:
        formatted = value.isoformat()
    elif style is DateFormat.MONTH_YEAR:
        formatted = f"{month} {value.year:04d}"
    elif style is DateFormat.YEAR_ONLY:
        formatted = f"{value.year:04d}"
    elif style is DateFormat.DAY_MONTH:
        formatted = f"{value.day} {month}"
    else:
        weekday = Weekday.from_gregorian(value)
        formatted = f"{weekday.english_name}, {value.year:04d} {month} {value.day}"

    if lang is Language.NEPALI:
        return to_nepali_numerals(formatted)
    return formatted


def format_date(
    value: Union[date, datetime],
    date_system: Union[str, DateSystem] = DateSystem.AD,
    language: Union[str, Language] = Language.ENGLISH,
    fmt: Union[str, DateFormat] = DateFormat.FULL,
    *,
    converter: Optional[BikramSambatConverter] = None,
) -> str:
    """Format a Gregorian date in the requested calendar.

    BS rendering falls back to AD when the date is outside the table or the
    table cannot place it exactly.
    """

    if isinstance(value, datetime):
        value = value.date()
    if DateSystem.from_code(date_system) is DateSystem.BS:
        conv = converter if converter is not None else get_default_converter()
        try:
            bs_date = conv.to_bs(value)
        except (YearOutOfRangeError, ApproximationRequired):
            return format_ad_date(value, language, fmt)
        return format_bs_date(bs_date, language, fmt, converter=conv)
    return format_ad_date(value, language, fmt)


def format_date_range(
    start: Union[date, datetime],
    end: Union[date, datetime],
    date_system: Union[str, DateSystem] = DateSystem.AD,
    language: Union[str, Language] = Language.ENGLISH,
    fmt: Union[str, DateFormat] = DateFormat.MONTH_YEAR,
    *,
    converter: Optional[BikramSambatConverter] = None,
) -> str:
    """Render two dates as a range, both ends in the same calendar and format."""

    first = format_date(start, date_system, language, fmt, converter=converter)
    last = format_date(end, date_system, language, fmt, converter=converter)
    return f"{first} – {last}"
