# src/mcal/features/multi_calendar.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

from mcal.core.lunisolar import LunarDate, LunarDateConverter
from mcal.core.solarterms import SolarTerm, SolarTermCalculator
from mcal.core.stembranch import StemBranch, StemBranchCalculator
from mcal.core.zodiac import ZodiacResolver, ZodiacSign
from mcal.features.festivals import Festival, FestivalCalendar


@dataclass(frozen=True)
class CombinedDateInfo:
    """
    Every calendar system's view of one Gregorian date.
    """
    date: date
    lunar: LunarDate
    zodiac: ZodiacSign
    solar_term: SolarTerm
    stem_branch: StemBranch
    day_stem_branch: StemBranch
    festivals: Tuple[Festival, ...] = field(default_factory=tuple)


class MultiCalendarResolver:
    """
    Single entry point for calendrical metadata of a date.

    Only the lunar conversion can fail (OutOfRangeError); the other
    converters are total.
    """

    def __init__(
        self,
        *,
        lunar: Optional[LunarDateConverter] = None,
        zodiac: Optional[ZodiacResolver] = None,
        solar_terms: Optional[SolarTermCalculator] = None,
        stem_branch: Optional[StemBranchCalculator] = None,
        festivals: Optional[FestivalCalendar] = None,
    ) -> None:
        self.stem_branch = stem_branch if stem_branch is not None else StemBranchCalculator()
        self.lunar = lunar if lunar is not None else LunarDateConverter(stem_branch=self.stem_branch)
        self.zodiac = zodiac if zodiac is not None else ZodiacResolver()
        self.solar_terms = solar_terms if solar_terms is not None else SolarTermCalculator()
        self.festivals = festivals if festivals is not None else FestivalCalendar(self.lunar)

    def resolve(self, d: date) -> CombinedDateInfo:
        lunar = self.lunar.convert(d)
        term = self.solar_terms.term_for(d)
        return CombinedDateInfo(
            date=d,
            lunar=lunar,
            zodiac=self.zodiac.resolve(d.month, d.day),
            solar_term=term,
            stem_branch=self.stem_branch.for_year(lunar.year),
            day_stem_branch=self.stem_branch.for_day(d),
            festivals=self.festivals.festivals_on(d, lunar, term),
        )

    def resolve_range(self, start: date, end: date) -> Iterator[CombinedDateInfo]:
        """
        Resolve every date in [start, end).
        """
        cur = start
        while cur < end:
            yield self.resolve(cur)
            cur += timedelta(days=1)
