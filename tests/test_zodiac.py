from __future__ import annotations

from datetime import date, timedelta

import pytest

from mcal.core.zodiac import ZodiacResolver

z = ZodiacResolver()


@pytest.mark.parametrize(
    "month, day, name",
    [
        (1, 1, "摩羯座"),
        (1, 19, "摩羯座"),
        (1, 20, "水瓶座"),
        (2, 18, "水瓶座"),
        (2, 19, "双鱼座"),
        (3, 20, "双鱼座"),
        (3, 21, "白羊座"),
        (4, 19, "白羊座"),
        (6, 21, "巨蟹座"),
        (8, 23, "处女座"),
        (11, 21, "天蝎座"),
        (12, 21, "射手座"),
        (12, 22, "摩羯座"),
        (12, 31, "摩羯座"),
    ],
)
def test_boundaries(month, day, name):
    assert z.resolve(month, day).name == name


def test_sign_fields():
    s = z.resolve(4, 1)
    assert s.english_name == "Aries"
    assert s.symbol == "♈"
    assert s.date_range_label == "3.21-4.19"
    assert s.element == "火"
    assert s.ruling_body == "火星"


def test_every_day_resolves():
    d = date(2024, 1, 1)
    names = []
    while d.year == 2024:
        names.append(z.resolve(d.month, d.day).name)
        d += timedelta(days=1)
    assert len(set(names)) == 12
    # each sign is one contiguous run, except 摩羯座 which wraps the year
    runs = [n for i, n in enumerate(names) if i == 0 or names[i - 1] != n]
    assert len(runs) == 13
    assert runs[0] == runs[-1] == "摩羯座"
    assert len(z.signs()) == 12
