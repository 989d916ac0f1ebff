from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from mcal.core.astronomy import AstronomyEngine, angdiff180, norm360
from mcal.core.config import SolarTermConfig
from mcal.core.providers.meeus_provider import MeeusProvider, julian_day_utc
from mcal.core.rootfind import bisect_datetime
from mcal.core.solarterms import (
    AstronomicalTermTable,
    SolarTermCalculator,
    StaticTermTable,
    solar_longitude_crossing,
)
from mcal.features.config import TERM_DEGS_IN_YEAR, term_info_from_deg, term_name_from_deg

UTC = timezone.utc
BEIJING = timezone(timedelta(hours=8))


@pytest.fixture(scope="module")
def calc() -> SolarTermCalculator:
    return SolarTermCalculator()


# civil dates in Beijing time
@pytest.mark.parametrize(
    "d, name",
    [
        (date(2024, 1, 20), "大寒"),
        (date(2024, 2, 4), "立春"),
        (date(2024, 2, 19), "雨水"),
        (date(2024, 3, 20), "春分"),
        (date(2024, 4, 4), "清明"),
        (date(2024, 6, 5), "芒种"),
        (date(2024, 12, 21), "冬至"),
        (date(2025, 1, 5), "小寒"),
    ],
)
def test_term_days(calc, d, name):
    t = calc.term_for(d)
    assert t.name == name
    assert t.days_until_next == 0
    assert t.exact_date_if_today == d
    assert calc.terms_in_year(d.year)[d] == name


def test_day_after_term(calc):
    t = calc.term_for(date(2024, 2, 5))
    assert t.name == "立春"
    assert t.is_minor_term is True
    assert t.exact_date_if_today is None
    assert t.days_until_next == 14
    assert t.next_name == "雨水"
    assert t.next_date == date(2024, 2, 19)
    assert t.degree == 315


def test_day_before_term(calc):
    t = calc.term_for(date(2024, 2, 3))
    assert t.name == "大寒"
    assert t.is_minor_term is False
    assert t.days_until_next == 1
    assert t.next_name == "立春"


def test_next_term_on_term_day(calc):
    t = calc.term_for(date(2024, 2, 4))
    assert t.next_name == "雨水"
    assert t.next_date == date(2024, 2, 19)


def test_year_wrap(calc):
    t = calc.term_for(date(2025, 1, 1))
    assert t.name == "冬至"
    assert t.next_name == "小寒"
    assert t.days_until_next == 4

    t = calc.term_for(date(2024, 12, 31))
    assert t.name == "冬至"
    assert t.next_date == date(2025, 1, 5)
    assert t.days_until_next == 5


def test_every_day_has_a_term(calc):
    d = date(2024, 1, 1)
    seen = set()
    while d.year == 2024:
        t = calc.term_for(d)
        assert 0 <= t.days_until_next <= 16
        assert t.next_date > d
        seen.add(t.name)
        d += timedelta(days=1)
    assert len(seen) == 24


@pytest.mark.parametrize("year", [1901, 1950, 2000, 2024, 2099])
def test_24_terms_in_order(year):
    table = AstronomicalTermTable()
    rows = table.term_dates(year)
    assert [deg for deg, _ in rows] == list(TERM_DEGS_IN_YEAR)

    dates = [d for _, d in rows]
    assert all(a < b for a, b in zip(dates, dates[1:]))
    assert all(d.year == year for d in dates)
    assert all(13 <= (b - a).days <= 17 for a, b in zip(dates, dates[1:]))


def test_minor_major_alternate():
    kinds = [term_info_from_deg(deg).kind for deg in TERM_DEGS_IN_YEAR]
    assert kinds[0] == "节"   # 小寒
    assert all(a != b for a, b in zip(kinds, kinds[1:]))
    assert term_name_from_deg(375.0) == "清明"


def test_crossing_instant_meets_target():
    eng = AstronomyEngine(provider=MeeusProvider())
    t = solar_longitude_crossing(eng, datetime(2024, 3, 20, tzinfo=UTC), target_deg=0.0)
    assert abs(angdiff180(eng.sun_lon(t))) < 1e-3
    # 2024-03-20 03:06 UTC
    assert abs((t - datetime(2024, 3, 20, 3, 6, 21, tzinfo=UTC)).total_seconds()) < 90


def test_crossing_not_bracketed():
    eng = AstronomyEngine(provider=MeeusProvider())
    cfg = SolarTermConfig(search_window_days=2)
    with pytest.raises(RuntimeError):
        solar_longitude_crossing(eng, datetime(2024, 6, 1, tzinfo=UTC), target_deg=0.0, config=cfg)


def test_term_dates_use_configured_offset():
    # 2024 冬至 is 2024-12-21 09:21 UTC; a -12h offset puts it on the 20th
    west = AstronomicalTermTable(config=SolarTermConfig(utc_offset_hours=-12.0))
    assert dict((deg, d) for deg, d in west.term_dates(2024))[270] == date(2024, 12, 20)


def test_static_table():
    computed = AstronomicalTermTable().term_dates(2024)
    calc = SolarTermCalculator(source=StaticTermTable({2024: computed}))
    assert calc.term_for(date(2024, 6, 1)) == SolarTermCalculator().term_for(date(2024, 6, 1))

    # needs 2023 for dates on or before 小寒
    with pytest.raises(KeyError):
        calc.term_for(date(2024, 1, 2))

    with pytest.raises(ValueError):
        StaticTermTable({2024: computed[:23]}).term_dates(2024)


def test_angle_helpers():
    assert norm360(-15.0) == 345.0
    assert angdiff180(350.0) == -10.0
    assert angdiff180(-180.0) == 180.0


def test_julian_day():
    assert julian_day_utc(datetime(2000, 1, 1, 12, tzinfo=UTC)) == pytest.approx(2451545.0)
    with pytest.raises(ValueError):
        julian_day_utc(datetime(2000, 1, 1))


def test_bisect_datetime():
    a = datetime(2024, 1, 1, tzinfo=UTC)
    root = a + timedelta(hours=7, minutes=13)

    def f(t):
        return (t - root).total_seconds() ** 3

    r = bisect_datetime(f, a, a + timedelta(days=1), tol_seconds=1.0)
    assert abs((r.t - root).total_seconds()) <= 1.0

    with pytest.raises(ValueError):
        bisect_datetime(f, a + timedelta(days=1), a + timedelta(days=2))


# term instants within a few minutes after Beijing midnight
@pytest.mark.parametrize(
    "d, name",
    [
        (date(2016, 7, 7), "小暑"),
        (date(2014, 3, 6), "惊蛰"),
        (date(2008, 5, 21), "小满"),
    ],
)
def test_terms_just_after_midnight(calc, d, name):
    assert calc.terms_in_year(d.year).get(d) == name

    t = calc.term_for(d)
    assert t.name == name
    assert t.exact_date_if_today == d

    before = calc.term_for(d - timedelta(days=1))
    assert before.name != name
    assert before.days_until_next == 1
    assert before.next_date == d


def test_instant_just_after_midnight():
    table = AstronomicalTermTable()
    instants = dict(table.term_instants(2016))
    # 小暑 2016-07-07 00:03 Beijing time
    t = instants[105].astimezone(BEIJING)
    assert t.date() == date(2016, 7, 7)
    assert abs((t - datetime(2016, 7, 7, 0, 3, 21, tzinfo=BEIJING)).total_seconds()) < 90
