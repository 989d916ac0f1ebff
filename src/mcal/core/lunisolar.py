# src/mcal/core/lunisolar.py
from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import List, Optional, Tuple

from mcal.core.errors import OutOfRangeError
from mcal.core.lunar_table import LunarYearInfo, LunarYearSource, PackedLunarTable
from mcal.core.stembranch import StemBranchCalculator
from mcal.features.config import lunar_day_display_name, lunar_month_display_name

log = logging.getLogger(__name__)


# ============================================================
# Public types
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    """
    农历 date: year / month / day / leap flag plus display labels.
    """
    year: int
    month: int
    day: int
    is_leap: bool
    month_display: str
    day_display: str
    zodiac_animal: str

    @property
    def description(self) -> str:
        return f"农历{self.month_display}{self.day_display}"


# ============================================================
# Year index (bisect over new-year dates)
# ============================================================

@dataclass(frozen=True)
class _YearIndex:
    years: Tuple[LunarYearInfo, ...]
    new_years: Tuple[date, ...]

    @property
    def first_day(self) -> date:
        return self.new_years[0]

    @property
    def last_day(self) -> date:
        return self.years[-1].end - timedelta(days=1)


@lru_cache(maxsize=8)
def _year_index(source: LunarYearSource) -> _YearIndex:
    years = tuple(source.year_info(y) for y in range(source.first_year, source.last_year + 1))
    for a, b in zip(years, years[1:]):
        if a.end != b.new_year:
            raise ValueError(f"lunar table is not contiguous between {a.year} and {b.year}")
    log.debug("indexed lunar years %d..%d (%s)", source.first_year, source.last_year, type(source).__name__)
    return _YearIndex(years=years, new_years=tuple(y.new_year for y in years))


# ============================================================
# Converter
# ============================================================

class LunarDateConverter:
    """
    Gregorian -> 农历 over an injected lunar year table.
    """

    def __init__(
        self,
        source: Optional[LunarYearSource] = None,
        *,
        stem_branch: Optional[StemBranchCalculator] = None,
    ) -> None:
        self.source = source if source is not None else PackedLunarTable()
        self.stem_branch = stem_branch if stem_branch is not None else StemBranchCalculator()

    @property
    def supported_range(self) -> Tuple[date, date]:
        idx = _year_index(self.source)
        return idx.first_day, idx.last_day

    def _require_in_range(self, d: date) -> _YearIndex:
        idx = _year_index(self.source)
        if not (idx.first_day <= d <= idx.last_day):
            raise OutOfRangeError(d, lower=idx.first_day, upper=idx.last_day)
        return idx

    def year_info(self, lunar_year: int) -> LunarYearInfo:
        y = int(lunar_year)
        if not (self.source.first_year <= y <= self.source.last_year):
            raise OutOfRangeError(y, lower=self.source.first_year, upper=self.source.last_year)
        return self.source.year_info(y)

    def convert(self, d: date) -> LunarDate:
        idx = self._require_in_range(d)
        info = idx.years[bisect_right(idx.new_years, d) - 1]

        offset = (d - info.new_year).days
        for month_no, is_leap, length in info.months():
            if offset < length:
                return self._make(info.year, month_no, offset + 1, is_leap)
            offset -= length

        # unreachable for a contiguous table
        raise RuntimeError(f"date {d} not covered by lunar year {info.year}")

    def _make(self, year: int, month: int, day: int, is_leap: bool) -> LunarDate:
        return LunarDate(
            year=year,
            month=month,
            day=day,
            is_leap=is_leap,
            month_display=lunar_month_display_name(month, is_leap),
            day_display=lunar_day_display_name(day),
            zodiac_animal=self.stem_branch.animal_for_year(year),
        )

    def month_length(self, lunar_year: int, month: int, is_leap: bool = False) -> int:
        info = self.year_info(lunar_year)
        for month_no, leap, length in info.months():
            if month_no == int(month) and leap == bool(is_leap):
                return length
        kind = "leap month" if is_leap else "month"
        raise ValueError(f"lunar year {lunar_year} has no {kind} {month}")

    def to_gregorian(self, lunar_year: int, month: int, day: int, is_leap: bool = False) -> date:
        """
        农历 -> Gregorian. Raises OutOfRangeError for years outside the table
        and ValueError for months / days that do not exist in that year.
        """
        info = self.year_info(lunar_year)
        offset = 0
        for month_no, leap, length in info.months():
            if month_no == int(month) and leap == bool(is_leap):
                if not (1 <= int(day) <= length):
                    raise ValueError(f"lunar {lunar_year}-{month} has {length} days (got day={day})")
                return info.new_year + timedelta(days=offset + int(day) - 1)
            offset += length
        kind = "leap month" if is_leap else "month"
        raise ValueError(f"lunar year {lunar_year} has no {kind} {month}")

    def leap_months(self, first_year: int, last_year: int) -> List[Tuple[int, int]]:
        """(lunar_year, leap_month) for every leap year in [first_year, last_year]."""
        out: List[Tuple[int, int]] = []
        for y in range(int(first_year), int(last_year) + 1):
            info = self.year_info(y)
            if info.leap_month:
                out.append((y, info.leap_month))
        return out
