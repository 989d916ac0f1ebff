from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from mcal.core.errors import MissingFieldError
from mcal.features.records import (
    INSTANCE_COLUMNS,
    UNTITLED,
    ReminderMethod,
    calendar_from_row,
    event_from_detail_row,
    event_from_row,
    millis_to_local,
    reminder_from_row,
)

BEIJING = timezone(timedelta(hours=8))

# 2024-02-10T00:00:00Z
T0 = 1707523200000


def _instance_row(**overrides):
    row = {
        "event_id": 7,
        "calendar_id": 2,
        "title": "家庭聚餐",
        "description": None,
        "begin": T0,
        "end": T0 + 2 * 3600 * 1000,
        "eventLocation": "北京",
        "allDay": 0,
        "calendar_color": 0xFF3366,
        "rrule": None,
    }
    row.update(overrides)
    return row


def test_instance_row():
    e = event_from_row(_instance_row(), tz=BEIJING)
    assert e.id == 7
    assert e.calendar_id == 2
    assert e.title == "家庭聚餐"
    assert e.start_time == datetime(2024, 2, 10, 8, 0)
    assert e.end_time == datetime(2024, 2, 10, 10, 0)
    assert e.location == "北京"
    assert e.is_all_day is False
    assert e.color == 0xFF3366
    assert e.description is None


def test_instance_row_defaults():
    e = event_from_row(_instance_row(title=None, allDay=1, rrule="FREQ=YEARLY"), tz=timezone.utc)
    assert e.title == UNTITLED
    assert e.is_all_day is True
    assert e.repeat_rule == "FREQ=YEARLY"
    assert e.start_time == datetime(2024, 2, 10, 0, 0)


@pytest.mark.parametrize("column", INSTANCE_COLUMNS)
def test_missing_column(column):
    row = _instance_row()
    del row[column]
    with pytest.raises(MissingFieldError) as ei:
        event_from_row(row, tz=BEIJING)
    assert ei.value.field == column
    assert column in str(ei.value)


def test_missing_field_is_key_error():
    with pytest.raises(KeyError):
        calendar_from_row({"_id": 1})


def test_required_value_null():
    with pytest.raises(ValueError):
        event_from_row(_instance_row(begin=None), tz=BEIJING)


def test_detail_row():
    row = {
        "_id": 9,
        "calendar_id": 1,
        "title": "",
        "description": "agenda",
        "dtstart": T0,
        "dtend": T0 + 3600 * 1000,
        "eventLocation": None,
        "allDay": None,
        "rrule": None,
    }
    e = event_from_detail_row(row, tz=BEIJING)
    assert e.id == 9
    assert e.title == UNTITLED
    assert e.description == "agenda"
    assert e.is_all_day is False
    assert e.color is None


def test_calendar_row():
    c = calendar_from_row(
        {
            "_id": 3,
            "calendar_displayName": "工作",
            "calendar_description": None,
            "account_name": "me@example.com",
            "account_type": "com.google",
            "calendar_color": -16776961,
            "visible": 1,
            "sync_events": 0,
        }
    )
    assert c.id == 3
    assert c.display_name == "工作"
    assert c.color == -16776961
    assert c.visible is True
    assert c.sync_events is False
    assert c.is_primary is False


@pytest.mark.parametrize(
    "method, expected",
    [(1, ReminderMethod.NOTIFICATION), (2, ReminderMethod.EMAIL), (4, ReminderMethod.ALARM), (None, ReminderMethod.NOTIFICATION)],
)
def test_reminder_row(method, expected):
    r = reminder_from_row({"_id": 1, "event_id": 7, "minutes": 15, "method": method})
    assert r.minutes == 15
    assert r.method is expected


def test_millis_to_local():
    assert millis_to_local(0, timezone.utc) == datetime(1970, 1, 1)
    assert millis_to_local(T0, BEIJING).tzinfo is None
