# src/mcal/features/records.py
from __future__ import annotations

"""
External record shapes -> domain entities.

The data collaborator hands over flat rows (column name -> value), one mapping
function per row shape. Every projected column must be present in the row;
values of nullable columns may be None. Epoch-millisecond instants are turned
into naive wall-clock datetimes with the tzinfo the collaborator localizes to.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Mapping, Optional

from mcal.core.errors import MissingFieldError

UNTITLED = "(无标题)"

# ============================================================
# Column names
# ============================================================

# instance rows (one row per occurrence in a time range)
INSTANCE_COLUMNS = (
    "event_id", "calendar_id", "title", "description", "begin", "end",
    "eventLocation", "allDay", "calendar_color", "rrule",
)

# event detail rows
EVENT_COLUMNS = (
    "_id", "calendar_id", "title", "description", "dtstart", "dtend",
    "eventLocation", "allDay", "rrule",
)

CALENDAR_COLUMNS = (
    "_id", "calendar_displayName", "calendar_description", "account_name",
    "account_type", "calendar_color", "visible", "sync_events",
)

REMINDER_COLUMNS = ("_id", "event_id", "minutes", "method")

METHOD_EMAIL = 2
METHOD_ALARM = 4


# ============================================================
# Domain entities
# ============================================================

@dataclass(frozen=True)
class EventRecord:
    """
    An event occurrence as supplied by the data collaborator. Read-only.
    """
    id: int
    calendar_id: int
    title: str
    start_time: datetime
    end_time: datetime
    is_all_day: bool = False
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[int] = None
    reminder_minutes: Optional[int] = None
    repeat_rule: Optional[str] = None


@dataclass(frozen=True)
class CalendarInfo:
    id: int
    display_name: str
    color: int
    description: Optional[str] = None
    account_name: Optional[str] = None
    account_type: Optional[str] = None
    visible: bool = True
    is_primary: bool = False
    sync_events: bool = True


class ReminderMethod(str, Enum):
    NOTIFICATION = "notification"
    EMAIL = "email"
    ALARM = "alarm"


@dataclass(frozen=True)
class EventReminder:
    id: int
    event_id: int
    minutes: int
    method: ReminderMethod = ReminderMethod.NOTIFICATION


# ============================================================
# Field extraction
# ============================================================

def _field(row: Mapping[str, Any], name: str, kind: str) -> Any:
    try:
        return row[name]
    except KeyError:
        raise MissingFieldError(name, kind) from None


def _int(row: Mapping[str, Any], name: str, kind: str) -> int:
    v = _field(row, name, kind)
    if v is None:
        raise ValueError(f"{kind}.{name} must not be null")
    return int(v)


def _opt_int(row: Mapping[str, Any], name: str, kind: str) -> Optional[int]:
    v = _field(row, name, kind)
    return None if v is None else int(v)


def _opt_str(row: Mapping[str, Any], name: str, kind: str) -> Optional[str]:
    v = _field(row, name, kind)
    return None if v is None else str(v)


def _flag(row: Mapping[str, Any], name: str, kind: str) -> bool:
    return _opt_int(row, name, kind) == 1


def millis_to_local(ms: int, tz: tzinfo) -> datetime:
    """Epoch milliseconds -> naive wall-clock datetime in tz."""
    return datetime.fromtimestamp(int(ms) / 1000.0, tz).replace(tzinfo=None)


# ============================================================
# Row mappers
# ============================================================

def event_from_row(row: Mapping[str, Any], *, tz: tzinfo) -> EventRecord:
    """Instance row (INSTANCE_COLUMNS) -> EventRecord."""
    kind = "instance"
    return EventRecord(
        id=_int(row, "event_id", kind),
        calendar_id=_int(row, "calendar_id", kind),
        title=_opt_str(row, "title", kind) or UNTITLED,
        description=_opt_str(row, "description", kind),
        start_time=millis_to_local(_int(row, "begin", kind), tz),
        end_time=millis_to_local(_int(row, "end", kind), tz),
        location=_opt_str(row, "eventLocation", kind),
        is_all_day=_flag(row, "allDay", kind),
        color=_opt_int(row, "calendar_color", kind),
        repeat_rule=_opt_str(row, "rrule", kind),
    )


def event_from_detail_row(row: Mapping[str, Any], *, tz: tzinfo) -> EventRecord:
    """Event detail row (EVENT_COLUMNS) -> EventRecord."""
    kind = "event"
    return EventRecord(
        id=_int(row, "_id", kind),
        calendar_id=_int(row, "calendar_id", kind),
        title=_opt_str(row, "title", kind) or UNTITLED,
        description=_opt_str(row, "description", kind),
        start_time=millis_to_local(_int(row, "dtstart", kind), tz),
        end_time=millis_to_local(_int(row, "dtend", kind), tz),
        location=_opt_str(row, "eventLocation", kind),
        is_all_day=_flag(row, "allDay", kind),
        repeat_rule=_opt_str(row, "rrule", kind),
    )


def calendar_from_row(row: Mapping[str, Any]) -> CalendarInfo:
    kind = "calendar"
    return CalendarInfo(
        id=_int(row, "_id", kind),
        display_name=_opt_str(row, "calendar_displayName", kind) or "",
        description=_opt_str(row, "calendar_description", kind),
        account_name=_opt_str(row, "account_name", kind),
        account_type=_opt_str(row, "account_type", kind),
        color=_int(row, "calendar_color", kind),
        visible=_flag(row, "visible", kind),
        sync_events=_flag(row, "sync_events", kind),
    )


def reminder_from_row(row: Mapping[str, Any]) -> EventReminder:
    kind = "reminder"
    method = _opt_int(row, "method", kind)
    if method == METHOD_EMAIL:
        m = ReminderMethod.EMAIL
    elif method == METHOD_ALARM:
        m = ReminderMethod.ALARM
    else:
        m = ReminderMethod.NOTIFICATION
    return EventReminder(
        id=_int(row, "_id", kind),
        event_id=_int(row, "event_id", kind),
        minutes=_int(row, "minutes", kind),
        method=m,
    )
