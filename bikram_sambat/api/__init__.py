"""Server-side helpers exposed by the Bikram Sambat calendar package."""

from . import (
    arithmetic,
    calendar_data,
    conversion,
    converter,
    exceptions,
    formatting,
    numerals,
    preferences,
    year_cache,
)

__all__ = [
    "arithmetic",
    "calendar_data",
    "conversion",
    "converter",
    "exceptions",
    "formatting",
    "numerals",
    "preferences",
    "year_cache",
]
