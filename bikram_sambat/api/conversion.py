"""Whitelisted conversion endpoints returning JSON-friendly payloads."""
from __future__ import annotations

from datetime import date, timedelta
from functools import wraps
from typing import Dict, Optional

from . import arithmetic, formatting, preferences
from .converter import (
    BSDate,
    bs_to_gregorian,
    coerce_bs,
    coerce_gregorian,
    convert_to_bs as _convert_to_bs,
    get_default_converter,
)
from .exceptions import CalendarError

try:  # pragma: no cover - frappe is unavailable during tests
    import frappe  # type: ignore
except ImportError:  # pragma: no cover
    frappe = None  # type: ignore

__all__ = [
    "convert_to_ad",
    "convert_to_bs",
    "format_for_user",
    "get_month_calendar",
    "get_supported_range",
]


def _surface_errors(func):
    """Report calendar errors through ``frappe.throw`` inside a Frappe request."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CalendarError, ValueError, TypeError) as exc:
            if frappe is not None and hasattr(frappe, "throw"):  # pragma: no cover
                frappe.throw(str(exc), exc=getattr(frappe, "ValidationError", None))
            raise

    return wrapper


def _bs_payload(value: BSDate) -> Dict[str, object]:
    return {
        "year": value.year,
        "month": value.month,
        "day": value.day,
        "iso": value.isoformat(),
        "month_name": value.bs_month.english_name,
        "month_name_ne": value.bs_month.nepali_name,
    }


@_surface_errors
def convert_to_bs(value) -> Dict[str, object]:
    """Convert a Gregorian date (string, date, or triple) to BS."""

    result = _convert_to_bs(value)
    payload = _bs_payload(result.date)
    payload["approximate"] = result.approximate
    return payload


@_surface_errors
def convert_to_ad(value) -> Dict[str, object]:
    ad_date = bs_to_gregorian(value)
    return {
        "iso": ad_date.isoformat(),
        "year": ad_date.year,
        "month": ad_date.month,
        "day": ad_date.day,
        "weekday": arithmetic.weekday(coerce_bs(value)).english_name,
    }


@_surface_errors
def get_month_calendar(year, month) -> Dict[str, object]:
    """Layout information for one BS month, as a date picker needs it."""

    year, month = int(year), int(month)
    days = arithmetic.days_for_month(year, month)
    first_ad = bs_to_gregorian((year, month, 1))
    return {
        "year": year,
        "month": month,
        "month_name": BSDate(year, month, 1).bs_month.english_name,
        "days_in_month": len(days),
        "first_weekday": arithmetic.first_weekday_of_month(year, month),
        "ad_start": first_ad.isoformat(),
        "ad_end": (first_ad + timedelta(days=len(days) - 1)).isoformat(),
    }


@_surface_errors
def get_supported_range() -> Dict[str, object]:
    converter = get_default_converter()
    min_year, max_year = converter.supported_year_range()
    return {
        "min_year": min_year,
        "max_year": max_year,
        "min_ad_date": converter.min_ad_date.isoformat(),
        "max_ad_date": converter.max_ad_date.isoformat(),
    }


@_surface_errors
def format_for_user(value, fmt: str = "full", user: Optional[str] = None) -> str:
    """Format a Gregorian date using the user's resolved preferences."""

    gy, gm, gd = coerce_gregorian(value)
    return formatting.format_date(
        date(gy, gm, gd),
        preferences.resolve_date_system(user).value,
        preferences.resolve_language(user).value,
        fmt,
    )


def _maybe_whitelist(func):  # pragma: no cover - exercised in Frappe environments
    if frappe and hasattr(frappe, "whitelist"):
        return frappe.whitelist()(func)  # type: ignore[attr-defined]
    return func


convert_to_bs = _maybe_whitelist(convert_to_bs)
convert_to_ad = _maybe_whitelist(convert_to_ad)
get_month_calendar = _maybe_whitelist(get_month_calendar)
get_supported_range = _maybe_whitelist(get_supported_range)
format_for_user = _maybe_whitelist(format_for_user)
