# src/mcal/core/stembranch.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from mcal.features.config import (
    EARTHLY_BRANCHES,
    EARTHLY_BRANCHES_BY_MOD12,
    HEAVENLY_STEMS,
    HEAVENLY_STEMS_BY_MOD10,
    ZODIAC_ANCHOR_YEAR,
    ZODIAC_ANIMALS,
)

# 1949-10-01 is a 甲子 day
_JIAZI_DAY_ORDINAL = date(1949, 10, 1).toordinal()


@dataclass(frozen=True)
class StemBranch:
    heavenly_stem: str
    earthly_branch: str
    combined_label: str
    zodiac_animal: str
    cycle_index: int   # 0..59, 0 == 甲子


def animal_for_year(lunar_year: int) -> str:
    return ZODIAC_ANIMALS[(int(lunar_year) - ZODIAC_ANCHOR_YEAR) % 12]


def _cycle_index(stem: str, branch: str) -> int:
    s = HEAVENLY_STEMS.index(stem)
    b = EARTHLY_BRANCHES.index(branch)
    # unique k in 0..59 with k % 10 == s and k % 12 == b
    return (6 * s - 5 * b) % 60


class StemBranchCalculator:
    """
    Sexagenary (干支) labels. Python's % is already non-negative, so years
    before the anchors need no special casing.
    """

    def for_year(self, lunar_year: int) -> StemBranch:
        y = int(lunar_year)
        stem = HEAVENLY_STEMS_BY_MOD10[y % 10]
        branch = EARTHLY_BRANCHES_BY_MOD12[y % 12]
        return StemBranch(
            heavenly_stem=stem,
            earthly_branch=branch,
            combined_label=stem + branch,
            zodiac_animal=animal_for_year(y),
            cycle_index=_cycle_index(stem, branch),
        )

    def for_day(self, d: date) -> StemBranch:
        k = (d.toordinal() - _JIAZI_DAY_ORDINAL) % 60
        stem = HEAVENLY_STEMS[k % 10]
        branch = EARTHLY_BRANCHES[k % 12]
        return StemBranch(
            heavenly_stem=stem,
            earthly_branch=branch,
            combined_label=stem + branch,
            zodiac_animal=ZODIAC_ANIMALS[k % 12],
            cycle_index=k,
        )

    def animal_for_year(self, lunar_year: int) -> str:
        return animal_for_year(lunar_year)
