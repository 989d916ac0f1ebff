from __future__ import annotations

from datetime import date

import pytest

from mcal.core.errors import OutOfRangeError
from mcal.features.festivals import FestivalType
from mcal.features.multi_calendar import MultiCalendarResolver


@pytest.fixture(scope="module")
def resolver() -> MultiCalendarResolver:
    return MultiCalendarResolver()


def _names(info):
    return [f.name for f in info.festivals]


def test_resolve_new_year(resolver):
    info = resolver.resolve(date(2024, 2, 10))
    assert info.date == date(2024, 2, 10)
    assert info.lunar.description == "农历正月初一"
    assert info.stem_branch.combined_label == "甲辰"
    assert info.zodiac.name == "水瓶座"
    assert info.solar_term.name == "立春"
    assert "春节" in _names(info)
    assert info.festivals[0].kind is FestivalType.LUNAR_NEW_YEAR


def test_year_pillar_follows_lunar_year(resolver):
    # after 1 January but before 春节
    info = resolver.resolve(date(2024, 2, 9))
    assert info.stem_branch.combined_label == "癸卯"
    assert info.lunar.zodiac_animal == info.stem_branch.zodiac_animal == "兔"


@pytest.mark.parametrize(
    "d, name",
    [
        (date(2024, 2, 9), "除夕"),
        (date(2025, 1, 28), "除夕"),
        (date(2024, 2, 24), "元宵节"),
        (date(2024, 6, 10), "端午节"),
        (date(2024, 9, 17), "中秋节"),
        (date(2024, 4, 4), "清明节"),
        (date(2024, 12, 21), "冬至"),
        (date(2024, 10, 1), "国庆节"),
        (date(2024, 12, 25), "圣诞节"),
        (date(2023, 2, 21), "龙抬头"),
    ],
)
def test_festivals(resolver, d, name):
    assert name in _names(resolver.resolve(d))


def test_leap_month_has_no_lunar_festival(resolver):
    info = resolver.resolve(date(2023, 3, 23))
    assert (info.lunar.month, info.lunar.day, info.lunar.is_leap) == (2, 2, True)
    assert "龙抬头" not in _names(info)


def test_festival_order(resolver):
    # 2020-10-01 is both 中秋节 and 国庆节
    info = resolver.resolve(date(2020, 10, 1))
    assert _names(info) == ["中秋节", "国庆节"]


def test_plain_day(resolver):
    assert resolver.resolve(date(2024, 3, 12)).festivals == ()


def test_resolve_range(resolver):
    days = list(resolver.resolve_range(date(2024, 2, 8), date(2024, 2, 12)))
    assert [d.date.day for d in days] == [8, 9, 10, 11]
    assert [d.lunar.day for d in days] == [29, 30, 1, 2]
    assert list(resolver.resolve_range(date(2024, 2, 8), date(2024, 2, 8))) == []


def test_out_of_range(resolver):
    with pytest.raises(OutOfRangeError):
        resolver.resolve(date(1899, 12, 31))
