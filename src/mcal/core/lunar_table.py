# src/mcal/core/lunar_table.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache
from typing import List, Protocol, Tuple, runtime_checkable

log = logging.getLogger(__name__)

# ============================================================
# Packed lunar year table, 1900..2100
#
#   bits 0-3  : leap month number (0 = no leap month)
#   bits 4-15 : month 1..12 length, bit (0x10000 >> m) set => 30 days else 29
#   bit 16    : leap month length, set => 30 days else 29
#
#   Lunar 1900-01-01 == Gregorian 1900-01-31.
# ============================================================

PACKED_LUNAR_YEARS: Tuple[int, ...] = (
    0x04bd8, 0x04ae0, 0x0a570, 0x054d5, 0x0d260, 0x0d950, 0x16554, 0x056a0, 0x09ad0, 0x055d2,  # 1900-1909
    0x04ae0, 0x0a5b6, 0x0a4d0, 0x0d250, 0x1d255, 0x0b540, 0x0d6a0, 0x0ada2, 0x095b0, 0x14977,  # 1910-1919
    0x04970, 0x0a4b0, 0x0b4b5, 0x06a50, 0x06d40, 0x1ab54, 0x02b60, 0x09570, 0x052f2, 0x04970,  # 1920-1929
    0x06566, 0x0d4a0, 0x0ea50, 0x16a95, 0x05ad0, 0x02b60, 0x186e3, 0x092e0, 0x1c8d7, 0x0c950,  # 1930-1939
    0x0d4a0, 0x1d8a6, 0x0b550, 0x056a0, 0x1a5b4, 0x025d0, 0x092d0, 0x0d2b2, 0x0a950, 0x0b557,  # 1940-1949
    0x06ca0, 0x0b550, 0x15355, 0x04da0, 0x0a5b0, 0x14573, 0x052b0, 0x0a9a8, 0x0e950, 0x06aa0,  # 1950-1959
    0x0aea6, 0x0ab50, 0x04b60, 0x0aae4, 0x0a570, 0x05260, 0x0f263, 0x0d950, 0x05b57, 0x056a0,  # 1960-1969
    0x096d0, 0x04dd5, 0x04ad0, 0x0a4d0, 0x0d4d4, 0x0d250, 0x0d558, 0x0b540, 0x0b6a0, 0x195a6,  # 1970-1979
    0x095b0, 0x049b0, 0x0a974, 0x0a4b0, 0x0b27a, 0x06a50, 0x06d40, 0x0af46, 0x0ab60, 0x09570,  # 1980-1989
    0x04af5, 0x04970, 0x064b0, 0x074a3, 0x0ea50, 0x06b58, 0x05ac0, 0x0ab60, 0x096d5, 0x092e0,  # 1990-1999
    0x0c960, 0x0d954, 0x0d4a0, 0x0da50, 0x07552, 0x056a0, 0x0abb7, 0x025d0, 0x092d0, 0x0cab5,  # 2000-2009
    0x0a950, 0x0b4a0, 0x0baa4, 0x0ad50, 0x055d9, 0x04ba0, 0x0a5b0, 0x15176, 0x052b0, 0x0a930,  # 2010-2019
    0x07954, 0x06aa0, 0x0ad50, 0x05b52, 0x04b60, 0x0a6e6, 0x0a4e0, 0x0d260, 0x0ea65, 0x0d530,  # 2020-2029
    0x05aa0, 0x076a3, 0x096d0, 0x04afb, 0x04ad0, 0x0a4d0, 0x1d0b6, 0x0d250, 0x0d520, 0x0dd45,  # 2030-2039
    0x0b5a0, 0x056d0, 0x055b2, 0x049b0, 0x0a577, 0x0a4b0, 0x0aa50, 0x1b255, 0x06d20, 0x0ada0,  # 2040-2049
    0x14b63, 0x09370, 0x049f8, 0x04970, 0x064b0, 0x168a6, 0x0ea50, 0x06b20, 0x1a6c4, 0x0aae0,  # 2050-2059
    0x092e0, 0x0d2e3, 0x0c960, 0x0d557, 0x0d4a0, 0x0da50, 0x05d55, 0x056a0, 0x0a6d0, 0x055d4,  # 2060-2069
    0x052d0, 0x0a9b8, 0x0a950, 0x0b4a0, 0x0b6a6, 0x0ad50, 0x055a0, 0x0aba4, 0x0a5b0, 0x052b0,  # 2070-2079
    0x0b273, 0x06930, 0x07337, 0x06aa0, 0x0ad50, 0x14b55, 0x04b60, 0x0a570, 0x054e4, 0x0d160,  # 2080-2089
    0x0e968, 0x0d520, 0x0daa0, 0x16aa6, 0x056d0, 0x04ae0, 0x0a9d4, 0x0a2d0, 0x0d150, 0x0f252,  # 2090-2099
    0x0d520,                                                                                    # 2100
)

PACKED_FIRST_YEAR = 1900
PACKED_EPOCH = date(1900, 1, 31)


@dataclass(frozen=True)
class LunarYearInfo:
    """
    One lunar year: where it starts and how its months are laid out.
    """
    year: int
    new_year: date
    month_lengths: Tuple[int, ...]   # regular months 1..12
    leap_month: int = 0              # 0 = none
    leap_length: int = 0

    def __post_init__(self) -> None:
        if len(self.month_lengths) != 12:
            raise ValueError(f"month_lengths must hold 12 entries (got {len(self.month_lengths)})")
        if any(n not in (29, 30) for n in self.month_lengths):
            raise ValueError(f"lunar months are 29 or 30 days: {self.month_lengths}")
        if not (0 <= self.leap_month <= 12):
            raise ValueError(f"invalid leap_month: {self.leap_month}")
        if self.leap_month and self.leap_length not in (29, 30):
            raise ValueError(f"invalid leap_length: {self.leap_length}")

    @property
    def total_days(self) -> int:
        return sum(self.month_lengths) + (self.leap_length if self.leap_month else 0)

    @property
    def end(self) -> date:
        """First day of the following lunar year."""
        return self.new_year + timedelta(days=self.total_days)

    def months(self) -> List[Tuple[int, bool, int]]:
        """
        (month_no, is_leap, length) in calendar order; the leap month follows
        the regular month it repeats.
        """
        out: List[Tuple[int, bool, int]] = []
        for m, n in enumerate(self.month_lengths, start=1):
            out.append((m, False, n))
            if m == self.leap_month:
                out.append((m, True, self.leap_length))
        return out


@runtime_checkable
class LunarYearSource(Protocol):
    first_year: int
    last_year: int

    def year_info(self, year: int) -> LunarYearInfo: ...


def unpack_year(code: int, year: int, new_year: date) -> LunarYearInfo:
    leap = code & 0xF
    lengths = tuple(30 if code & (0x10000 >> m) else 29 for m in range(1, 13))
    leap_len = (30 if code & 0x10000 else 29) if leap else 0
    return LunarYearInfo(year=year, new_year=new_year, month_lengths=lengths, leap_month=leap, leap_length=leap_len)


@lru_cache(maxsize=1)
def _unpacked_years() -> Tuple[LunarYearInfo, ...]:
    out: List[LunarYearInfo] = []
    start = PACKED_EPOCH
    for i, code in enumerate(PACKED_LUNAR_YEARS):
        info = unpack_year(code, PACKED_FIRST_YEAR + i, start)
        out.append(info)
        start = info.end
    log.debug("unpacked lunar table %d..%d", out[0].year, out[-1].year)
    return tuple(out)


@dataclass(frozen=True)
class PackedLunarTable:
    """
    Built-in lunar year table (1900..2100).
    """
    first_year: int = PACKED_FIRST_YEAR
    last_year: int = PACKED_FIRST_YEAR + len(PACKED_LUNAR_YEARS) - 1

    def year_info(self, year: int) -> LunarYearInfo:
        y = int(year)
        if not (self.first_year <= y <= self.last_year):
            raise KeyError(f"lunar year {year} not in table ({self.first_year}..{self.last_year})")
        return _unpacked_years()[y - PACKED_FIRST_YEAR]
