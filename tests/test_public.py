from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from mcal.api.public import get_calendar_day, get_day_agenda, get_month_grid, get_week_slots
from mcal.features.records import EventRecord


def _ev(id_: int, start: datetime, title: str = "standup") -> EventRecord:
    return EventRecord(id=id_, calendar_id=1, title=title, start_time=start, end_time=start.replace(hour=start.hour + 1))


def test_calendar_day_payload():
    res = get_calendar_day("2024-02-10")
    json.dumps(res, ensure_ascii=False)

    assert res["date"] == "2024-02-10"
    assert res["lunar"]["description"] == "农历正月初一"
    assert res["lunar"]["is_leap"] is False
    assert res["year_stem_branch"]["label"] == "甲辰"
    assert res["zodiac"]["english_name"] == "Aquarius"
    assert res["solar_term"]["name"] == "立春"
    assert res["solar_term"]["exact_date"] is None
    assert res["solar_term"]["next_date"] == "2024-02-19"
    assert {"name": "春节", "kind": "lunar_new_year"} in res["festivals"]


def test_calendar_day_accepts_date():
    assert get_calendar_day(date(2024, 2, 4))["solar_term"]["exact_date"] == "2024-02-04"


def test_calendar_day_bad_input():
    with pytest.raises(ValueError):
        get_calendar_day("2024/02/10")
    with pytest.raises(ValueError):
        get_calendar_day("1800-01-01")


def test_month_grid_payload():
    events = [_ev(1, datetime(2024, 2, 14, 9))]
    res = get_month_grid(2024, 2, events, today="2024-02-14")
    json.dumps(res, ensure_ascii=False)

    assert res["year"] == 2024 and res["month"] == 2
    assert len(res["rows"]) == 6
    cells = [c for row in res["rows"] for c in row]
    assert len(cells) == 42

    feb14 = next(c for c in cells if c["date"] == "2024-02-14")
    assert feb14["is_today"] is True
    assert feb14["event_count"] == 1
    assert feb14["events"][0]["start_time"] == "2024-02-14T09:00:00"
    assert feb14["info"]["lunar"]["day_display"] == "初五"
    assert "情人节" in [f["name"] for f in feb14["info"]["festivals"]]


def test_week_slots_payload():
    res = get_week_slots("2024-02-14", [_ev(1, datetime(2024, 2, 14, 9))])
    assert len(res) == 168
    assert res[0]["start"] == "2024-02-12T00:00:00"
    busy = [s for s in res if not s["is_available"]]
    assert len(busy) == 3
    assert busy[0]["event"]["id"] == 1


def test_day_agenda_payload():
    events = [_ev(1, datetime(2024, 2, 14, 15), "b"), _ev(2, datetime(2024, 2, 14, 9), "a")]
    res = get_day_agenda("2024-02-14", events)
    assert res["date"] == "2024-02-14"
    assert [e["title"] for e in res["events"]] == ["a", "b"]


def test_month_grid_at_table_start():
    res = get_month_grid(1900, 2)
    cells = [c for row in res["rows"] for c in row]
    assert cells[0]["date"] == "1900-01-28"
    assert cells[0]["info"] is None
    feb1 = next(c for c in cells if c["date"] == "1900-02-01")
    assert feb1["info"]["lunar"]["day_display"] == "初二"
