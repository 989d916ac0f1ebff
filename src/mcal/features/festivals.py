# src/mcal/features/festivals.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from mcal.core.lunisolar import LunarDate, LunarDateConverter
from mcal.core.solarterms import SolarTerm


class FestivalType(str, Enum):
    LUNAR_NEW_YEAR = "lunar_new_year"
    LANTERN_FESTIVAL = "lantern_festival"
    QINGMING = "qingming"
    DRAGON_BOAT_FESTIVAL = "dragon_boat_festival"
    MID_AUTUMN_FESTIVAL = "mid_autumn_festival"
    DOUBLE_NINTH_FESTIVAL = "double_ninth_festival"
    WINTER_SOLSTICE = "winter_solstice"
    OFFICIAL_HOLIDAY = "official_holiday"
    TRADITIONAL_FESTIVAL = "traditional_festival"
    WESTERN_FESTIVAL = "western_festival"


@dataclass(frozen=True)
class Festival:
    name: str
    kind: FestivalType


# (lunar month, lunar day) -> festival; never matched on a leap month
LUNAR_FESTIVALS: Dict[Tuple[int, int], Festival] = {
    (1, 1):   Festival("春节", FestivalType.LUNAR_NEW_YEAR),
    (1, 15):  Festival("元宵节", FestivalType.LANTERN_FESTIVAL),
    (2, 2):   Festival("龙抬头", FestivalType.TRADITIONAL_FESTIVAL),
    (5, 5):   Festival("端午节", FestivalType.DRAGON_BOAT_FESTIVAL),
    (7, 7):   Festival("七夕节", FestivalType.TRADITIONAL_FESTIVAL),
    (7, 15):  Festival("中元节", FestivalType.TRADITIONAL_FESTIVAL),
    (8, 15):  Festival("中秋节", FestivalType.MID_AUTUMN_FESTIVAL),
    (9, 9):   Festival("重阳节", FestivalType.DOUBLE_NINTH_FESTIVAL),
    (12, 8):  Festival("腊八节", FestivalType.TRADITIONAL_FESTIVAL),
    (12, 23): Festival("小年", FestivalType.TRADITIONAL_FESTIVAL),
}

NEW_YEARS_EVE = Festival("除夕", FestivalType.TRADITIONAL_FESTIVAL)

# festivals that fall on the day of a solar term
TERM_FESTIVALS: Dict[str, Festival] = {
    "清明": Festival("清明节", FestivalType.QINGMING),
    "冬至": Festival("冬至", FestivalType.WINTER_SOLSTICE),
}

GREGORIAN_FESTIVALS: Dict[Tuple[int, int], Festival] = {
    (1, 1):   Festival("元旦", FestivalType.OFFICIAL_HOLIDAY),
    (2, 14):  Festival("情人节", FestivalType.WESTERN_FESTIVAL),
    (5, 1):   Festival("劳动节", FestivalType.OFFICIAL_HOLIDAY),
    (6, 1):   Festival("儿童节", FestivalType.OFFICIAL_HOLIDAY),
    (10, 1):  Festival("国庆节", FestivalType.OFFICIAL_HOLIDAY),
    (12, 25): Festival("圣诞节", FestivalType.WESTERN_FESTIVAL),
}


class FestivalCalendar:
    def __init__(self, converter: Optional[LunarDateConverter] = None) -> None:
        self.converter = converter if converter is not None else LunarDateConverter()

    def _is_new_years_eve(self, lunar: LunarDate) -> bool:
        if lunar.is_leap or lunar.month != 12:
            return False
        return lunar.day == self.converter.month_length(lunar.year, 12)

    def festivals_on(self, d: date, lunar: LunarDate, term: SolarTerm) -> Tuple[Festival, ...]:
        """
        Festivals of one day, ordered lunar -> solar term -> Gregorian.
        """
        out: List[Festival] = []

        if not lunar.is_leap:
            f = LUNAR_FESTIVALS.get((lunar.month, lunar.day))
            if f is not None:
                out.append(f)
        if self._is_new_years_eve(lunar):
            out.append(NEW_YEARS_EVE)

        if term.exact_date_if_today is not None:
            f = TERM_FESTIVALS.get(term.name)
            if f is not None:
                out.append(f)

        f = GREGORIAN_FESTIVALS.get((d.month, d.day))
        if f is not None:
            out.append(f)

        return tuple(out)
