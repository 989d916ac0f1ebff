# src/mcal/core/zodiac.py
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple

from mcal.features.config import ZODIAC_SIGNS


@dataclass(frozen=True)
class ZodiacSign:
    name: str
    english_name: str
    symbol: str
    date_range_label: str
    element: str
    ruling_body: str


_SIGNS: Tuple[ZodiacSign, ...] = tuple(
    ZodiacSign(name=n, english_name=en, symbol=sym, date_range_label=lbl, element=el, ruling_body=rb)
    for _m, _d, n, en, sym, lbl, el, rb in ZODIAC_SIGNS
)
_STARTS: List[Tuple[int, int]] = [(m, d) for m, d, *_ in ZODIAC_SIGNS]


class ZodiacResolver:
    """
    Western zodiac by (month, day). Each sign owns its start date; the last
    sign of the year (摩羯座, from 12.22) also covers January up to 1.19.
    """

    def resolve(self, month: int, day: int) -> ZodiacSign:
        i = bisect_right(_STARTS, (int(month), int(day))) - 1
        # before 1.20 -> wrap to the December sign
        return _SIGNS[i]

    def signs(self) -> Tuple[ZodiacSign, ...]:
        return _SIGNS
