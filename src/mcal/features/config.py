# src/mcal/features/config.py
from __future__ import annotations

"""
Feature-level constants / label tables.

- 二十四节气 (solar terms): 0..345 deg (15-deg step) => name / kind(节|中气) / n(0..23)
- lunar month / day display names
- heavenly stems, earthly branches, zodiac animals
- Western zodiac signs

Every table here is process-wide constant data (tuples / read-only mappings).
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

# ============================================================
# 二十四节气 (24 solar terms)
#   n = (deg_norm / 15) % 24
#   kind:
#     n even -> 中气 (major term, deg % 30 == 0)
#     n odd  -> 节   (minor term, deg % 30 == 15)
# ============================================================

SOLAR_TERMS: Tuple[Tuple[int, str], ...] = (
    (0,   "春分"),
    (15,  "清明"),
    (30,  "谷雨"),
    (45,  "立夏"),
    (60,  "小满"),
    (75,  "芒种"),
    (90,  "夏至"),
    (105, "小暑"),
    (120, "大暑"),
    (135, "立秋"),
    (150, "处暑"),
    (165, "白露"),
    (180, "秋分"),
    (195, "寒露"),
    (210, "霜降"),
    (225, "立冬"),
    (240, "小雪"),
    (255, "大雪"),
    (270, "冬至"),
    (285, "小寒"),
    (300, "大寒"),
    (315, "立春"),
    (330, "雨水"),
    (345, "惊蛰"),
)

SOLAR_TERM_NAME_BY_DEG: Mapping[int, str] = MappingProxyType({deg: name for deg, name in SOLAR_TERMS})

# Order of the terms inside one Gregorian year: 小寒 (early Jan) .. 冬至 (late Dec)
TERM_DEGS_IN_YEAR: Tuple[int, ...] = tuple((285 + 15 * k) % 360 for k in range(24))

MAJOR_TERM_KIND = "中气"
MINOR_TERM_KIND = "节"


def normalize_term_deg(deg: float) -> int:
    """
    Normalize arbitrary degree value into one of 0, 15, ..., 345.
    """
    d = float(deg) % 360.0
    k = int(round(d / 15.0)) % 24
    return k * 15


def term_kind_from_deg(deg: float) -> str:
    n = normalize_term_deg(deg) // 15
    return MAJOR_TERM_KIND if n % 2 == 0 else MINOR_TERM_KIND


def is_minor_term_deg(deg: float) -> bool:
    return term_kind_from_deg(deg) == MINOR_TERM_KIND


def term_name_from_deg(deg: float) -> str:
    deg_norm = normalize_term_deg(deg)
    try:
        return SOLAR_TERM_NAME_BY_DEG[deg_norm]
    except KeyError as e:
        raise KeyError(f"Unknown solar term degree after normalization: deg={deg} -> {deg_norm}") from e


@dataclass(frozen=True)
class TermInfo:
    n: int
    deg: int
    kind: str
    name: str


def term_info_from_deg(deg: float) -> TermInfo:
    deg_norm = normalize_term_deg(deg)
    n = deg_norm // 15
    return TermInfo(n=n, deg=deg_norm, kind=term_kind_from_deg(deg_norm), name=SOLAR_TERM_NAME_BY_DEG[deg_norm])


# ============================================================
# 农历 month / day names
# ============================================================

LUNAR_MONTH_NAMES: Tuple[str, ...] = (
    "正月", "二月", "三月", "四月", "五月", "六月",
    "七月", "八月", "九月", "十月", "冬月", "腊月",
)

LEAP_PREFIX = "闰"

_DAY_TENS: Tuple[str, ...] = ("初", "十", "廿")
_DAY_ONES: Tuple[str, ...] = ("一", "二", "三", "四", "五", "六", "七", "八", "九")

# exact multiples of ten are irregular; they are never composed from tens + ones
LUNAR_DAY_TENS_SPECIAL: Mapping[int, str] = MappingProxyType({
    10: "初十",
    20: "二十",
    30: "三十",
})

LUNAR_DAY_NAMES: Tuple[str, ...] = tuple(
    LUNAR_DAY_TENS_SPECIAL.get(d) or (_DAY_TENS[d // 10] + _DAY_ONES[d % 10 - 1])
    for d in range(1, 31)
)


def lunar_month_display_name(month_no: int, is_leap: bool = False) -> str:
    m = int(month_no)
    if not (1 <= m <= 12):
        raise ValueError(f"invalid lunar month_no: {month_no}")
    base = LUNAR_MONTH_NAMES[m - 1]
    return f"{LEAP_PREFIX}{base}" if is_leap else base


def lunar_day_display_name(day: int) -> str:
    d = int(day)
    if not (1 <= d <= 30):
        raise ValueError(f"invalid lunar day: {day}")
    return LUNAR_DAY_NAMES[d - 1]


# ============================================================
# 干支 / 生肖
#   stems / branches are rotated so that plain `year % 10` and `year % 12`
#   index them (year 4 == 甲子, so index 0 is 庚 / 申).
# ============================================================

HEAVENLY_STEMS_BY_MOD10: Tuple[str, ...] = ("庚", "辛", "壬", "癸", "甲", "乙", "丙", "丁", "戊", "己")
EARTHLY_BRANCHES_BY_MOD12: Tuple[str, ...] = ("申", "酉", "戌", "亥", "子", "丑", "寅", "卯", "辰", "巳", "午", "未")

# canonical orderings (甲 / 子 first) used for cycle indices
HEAVENLY_STEMS: Tuple[str, ...] = ("甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸")
EARTHLY_BRANCHES: Tuple[str, ...] = ("子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥")

# 1900 is a 鼠 year
ZODIAC_ANIMALS: Tuple[str, ...] = ("鼠", "牛", "虎", "兔", "龙", "蛇", "马", "羊", "猴", "鸡", "狗", "猪")
ZODIAC_ANCHOR_YEAR = 1900


# ============================================================
# 星座 (Western zodiac)
#   (start_month, start_day, name, english_name, symbol, range_label, element, ruling_body)
#   ordered by start date within the year; 摩羯座 starts in December and
#   wraps across the year boundary.
# ============================================================

ZODIAC_SIGNS: Tuple[Tuple[int, int, str, str, str, str, str, str], ...] = (
    (1, 20,  "水瓶座", "Aquarius",    "♒", "1.20-2.18",   "风", "天王星"),
    (2, 19,  "双鱼座", "Pisces",      "♓", "2.19-3.20",   "水", "海王星"),
    (3, 21,  "白羊座", "Aries",       "♈", "3.21-4.19",   "火", "火星"),
    (4, 20,  "金牛座", "Taurus",      "♉", "4.20-5.20",   "土", "金星"),
    (5, 21,  "双子座", "Gemini",      "♊", "5.21-6.20",   "风", "水星"),
    (6, 21,  "巨蟹座", "Cancer",      "♋", "6.21-7.22",   "水", "月球"),
    (7, 23,  "狮子座", "Leo",         "♌", "7.23-8.22",   "火", "太阳"),
    (8, 23,  "处女座", "Virgo",       "♍", "8.23-9.22",   "土", "水星"),
    (9, 23,  "天秤座", "Libra",       "♎", "9.23-10.22",  "风", "金星"),
    (10, 23, "天蝎座", "Scorpio",     "♏", "10.23-11.21", "水", "冥王星"),
    (11, 22, "射手座", "Sagittarius", "♐", "11.22-12.21", "火", "木星"),
    (12, 22, "摩羯座", "Capricorn",   "♑", "12.22-1.19",  "土", "土星"),
)
