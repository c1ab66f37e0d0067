"""Cumulative day offsets derived from the month-length table."""
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from itertools import accumulate
from typing import Dict, List, Optional, Tuple

from .approximation import AVERAGE_BS_YEAR_DAYS
from .calendar_data import CalendarTable, load_default_table
from .exceptions import DataIntegrityError

__all__ = [
    "REFERENCE_ANCHOR",
    "ReferenceAnchor",
    "YearCache",
    "YearCacheEntry",
    "get_default_cache",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceAnchor:
    """A BS new year's day paired with its Gregorian date."""

    bs_year: int
    ad_date: date
    bs_month: int = 1
    bs_day: int = 1


# 1 Baishakh 2000 BS fell on Wednesday 14 April 1943. Cross-checked against
# 17 Poush 2000 = 1 Jan 1944 and the new years of 2080, 2081 and 2082 BS.
REFERENCE_ANCHOR = ReferenceAnchor(bs_year=2000, ad_date=date(1943, 4, 14))


@dataclass(frozen=True)
class YearCacheEntry:
    year: int
    days_from_reference: int
    month_start_offsets: Tuple[int, ...]
    crosses_gap: bool = False

    @property
    def length(self) -> int:
        return self.month_start_offsets[-1]


def _month_offsets(lengths: Tuple[int, ...]) -> Tuple[int, ...]:
    return (0, *accumulate(lengths))


class YearCache:
    """Per-year offsets from the reference anchor, built once and then read-only.

    Years without table data inside the nominal range are skipped: they get
    no entry and contribute no days. Entries reached across such a gap keep
    ``crosses_gap=True`` because their offsets can no longer be trusted.
    """

    def __init__(
        self,
        entries: Dict[int, YearCacheEntry],
        anchor: ReferenceAnchor,
        gaps: Tuple[int, ...] = (),
    ) -> None:
        self._entries = dict(entries)
        self.anchor = anchor
        self.gaps = gaps
        self._years: List[int] = sorted(self._entries)
        self._offsets: List[int] = [self._entries[year].days_from_reference for year in self._years]
        for previous, current in zip(self._offsets, self._offsets[1:]):
            if current <= previous:
                raise DataIntegrityError("year offsets are not strictly increasing")

    @classmethod
    def build(cls, table: CalendarTable, anchor: ReferenceAnchor = REFERENCE_ANCHOR) -> "YearCache":
        if anchor.bs_month != 1 or anchor.bs_day != 1:
            raise DataIntegrityError("reference anchor must be the first day of a BS year")
        if anchor.bs_year not in table:
            raise DataIntegrityError(f"reference year {anchor.bs_year} is missing from the calendar table")

        min_year, max_year = table.supported_year_range()
        entries: Dict[int, YearCacheEntry] = {}
        gaps: List[int] = []

        offset = 0
        crossed = False
        for year in range(anchor.bs_year, max_year + 1):
            lengths = table.months(year)
            if lengths is None:
                gaps.append(year)
                crossed = True
                continue
            entries[year] = YearCacheEntry(year, offset, _month_offsets(lengths), crossed)
            offset += sum(lengths)

        offset = 0
        crossed = False
        for year in range(anchor.bs_year - 1, min_year - 1, -1):
            lengths = table.months(year)
            if lengths is None:
                gaps.append(year)
                crossed = True
                continue
            offset -= sum(lengths)
            entries[year] = YearCacheEntry(year, offset, _month_offsets(lengths), crossed)

        if gaps:
            logger.warning(
                "Calendar table has no data for BS years %s; offsets across them are unreliable",
                ", ".join(str(year) for year in sorted(gaps)),
            )
        return cls(entries, anchor, tuple(sorted(gaps)))

    def __contains__(self, year: object) -> bool:
        return year in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_complete(self) -> bool:
        return not self.gaps

    def entry(self, year: int) -> Optional[YearCacheEntry]:
        return self._entries.get(year)

    def find_year(self, days_diff: int) -> Optional[YearCacheEntry]:
        """Return the entry with the greatest offset not after ``days_diff``."""

        index = bisect_right(self._offsets, days_diff) - 1
        if index < 0:
            return None
        return self._entries[self._years[index]]

    @property
    def min_ad_date(self) -> date:
        first = self._entries[self._years[0]]
        return self.anchor.ad_date + timedelta(days=first.days_from_reference)

    @property
    def max_ad_date(self) -> date:
        last = self._entries[self._years[-1]]
        return self.anchor.ad_date + timedelta(days=last.days_from_reference + last.length - 1)

    def _estimated_gap_days(self, gap_years: List[int]) -> timedelta:
        return timedelta(days=round(len(gap_years) * AVERAGE_BS_YEAR_DAYS))

    @property
    def nominal_min_ad_date(self) -> date:
        """First AD date of the table's year range, estimated across missing years.

        Equal to :attr:`min_ad_date` when the table has no gaps.
        """

        earlier = [year for year in self.gaps if year < self.anchor.bs_year]
        return self.min_ad_date - self._estimated_gap_days(earlier)

    @property
    def nominal_max_ad_date(self) -> date:
        later = [year for year in self.gaps if year > self.anchor.bs_year]
        return self.max_ad_date + self._estimated_gap_days(later)


@lru_cache(maxsize=1)
def get_default_cache() -> YearCache:
    """Return the cache for the bundled table and the canonical anchor."""

    return YearCache.build(load_default_table(), REFERENCE_ANCHOR)
