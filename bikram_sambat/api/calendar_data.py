"""Month-length table for the Bikram Sambat calendar.

The table is published in the national Panchang and changes only when the
almanac is corrected, so it lives in ``bikram_sambat/data/month_lengths.json``
rather than in code. Each row maps a BS year to the lengths of its twelve
months, Baishakh first.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .exceptions import DataIntegrityError

__all__ = [
    "CalendarTable",
    "DEFAULT_TABLE_PATH",
    "MAX_MONTH_LENGTH",
    "MIN_MONTH_LENGTH",
    "MONTHS_PER_YEAR",
    "load_default_table",
]

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "month_lengths.json"
MONTHS_PER_YEAR = 12
MIN_MONTH_LENGTH = 29
MAX_MONTH_LENGTH = 32


def _validate_row(year: int, lengths: Iterable[object]) -> Tuple[int, ...]:
    row = tuple(lengths)
    if len(row) != MONTHS_PER_YEAR:
        raise DataIntegrityError(
            f"BS year {year} has {len(row)} month lengths, expected {MONTHS_PER_YEAR}"
        )
    for index, value in enumerate(row, start=1):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataIntegrityError(f"BS {year}-{index:02d}: month length {value!r} is not an integer")
        if not (MIN_MONTH_LENGTH <= value <= MAX_MONTH_LENGTH):
            raise DataIntegrityError(
                f"BS {year}-{index:02d}: month length {value} outside "
                f"{MIN_MONTH_LENGTH}..{MAX_MONTH_LENGTH}"
            )
    return row  # type: ignore[return-value]


class CalendarTable:
    """Read-only lookup over the per-year month lengths."""

    def __init__(self, data: Mapping[Union[int, str], Iterable[int]]) -> None:
        if not data:
            raise DataIntegrityError("calendar table is empty")
        rows: Dict[int, Tuple[int, ...]] = {}
        for key, lengths in data.items():
            year = int(key)
            rows[year] = _validate_row(year, lengths)
        self._rows: Mapping[int, Tuple[int, ...]] = MappingProxyType(rows)
        self._min_year = min(rows)
        self._max_year = max(rows)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "CalendarTable":
        """Load a table from a JSON object keyed by BS year."""

        with open(path, encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise DataIntegrityError(f"{path}: expected a JSON object keyed by year")
        return cls(payload)

    def __contains__(self, year: object) -> bool:
        return year in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"CalendarTable({self._min_year}..{self._max_year}, {len(self._rows)} years)"

    @property
    def min_year(self) -> int:
        return self._min_year

    @property
    def max_year(self) -> int:
        return self._max_year

    def supported_year_range(self) -> Tuple[int, int]:
        return self._min_year, self._max_year

    def years(self) -> List[int]:
        return sorted(self._rows)

    def months(self, year: int) -> Optional[Tuple[int, ...]]:
        """Return the twelve month lengths for ``year`` or ``None``."""

        return self._rows.get(year)

    def month_length(self, year: int, month: int) -> Optional[int]:
        if not (1 <= month <= MONTHS_PER_YEAR):
            return None
        row = self._rows.get(year)
        if row is None:
            return None
        return row[month - 1]

    def year_length(self, year: int) -> Optional[int]:
        row = self._rows.get(year)
        if row is None:
            return None
        return sum(row)

    def missing_years(self) -> List[int]:
        """Years inside the nominal range that have no row."""

        return [year for year in range(self._min_year, self._max_year + 1) if year not in self._rows]


@lru_cache(maxsize=1)
def load_default_table() -> CalendarTable:
    """Return the bundled table, loading it on first use."""

    return CalendarTable.from_json(DEFAULT_TABLE_PATH)
