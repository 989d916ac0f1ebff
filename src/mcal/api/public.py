from __future__ import annotations

import logging
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from mcal.features.grid import CalendarGridBuilder, DayCell, MonthGrid, TimeSlot
from mcal.features.multi_calendar import CombinedDateInfo, MultiCalendarResolver
from mcal.features.records import EventRecord

log = logging.getLogger("mcal.api.public")


# ============================================================
# Payload models
# ============================================================
class LunarView(BaseModel):
    year: int
    month: int
    day: int
    is_leap: bool = Field(default=False, description="true for a 闰月 (leap month)")
    month_display: str
    day_display: str
    zodiac_animal: str
    description: str


class ZodiacView(BaseModel):
    name: str
    english_name: str
    symbol: str
    date_range: str
    element: str
    ruling_body: str


class SolarTermView(BaseModel):
    name: str
    is_minor_term: bool
    days_until_next: int = Field(ge=0)
    exact_date: Optional[date] = None
    next_name: str
    next_date: date


class StemBranchView(BaseModel):
    heavenly_stem: str
    earthly_branch: str
    label: str
    zodiac_animal: str


class FestivalView(BaseModel):
    name: str
    kind: str


class DayInfoView(BaseModel):
    date: date
    lunar: LunarView
    zodiac: ZodiacView
    solar_term: SolarTermView
    year_stem_branch: StemBranchView
    day_stem_branch: StemBranchView
    festivals: List[FestivalView] = Field(default_factory=list)


class EventView(BaseModel):
    id: int
    calendar_id: int
    title: str
    start_time: datetime
    end_time: datetime
    is_all_day: bool = False
    location: Optional[str] = None


class DayCellView(BaseModel):
    date: date
    is_current_month: bool
    is_today: bool
    event_count: int
    events: List[EventView] = Field(default_factory=list)
    info: Optional[DayInfoView] = None


class MonthGridView(BaseModel):
    year: int
    month: int
    rows: List[List[DayCellView]]


class TimeSlotView(BaseModel):
    start: datetime
    end: datetime
    is_available: bool
    event: Optional[EventView] = None


# ============================================================
# Domain -> view
# ============================================================
def day_info_view(info: CombinedDateInfo) -> DayInfoView:
    l = info.lunar
    z = info.zodiac
    t = info.solar_term
    ys = info.stem_branch
    ds = info.day_stem_branch
    return DayInfoView(
        date=info.date,
        lunar=LunarView(
            year=l.year,
            month=l.month,
            day=l.day,
            is_leap=l.is_leap,
            month_display=l.month_display,
            day_display=l.day_display,
            zodiac_animal=l.zodiac_animal,
            description=l.description,
        ),
        zodiac=ZodiacView(
            name=z.name,
            english_name=z.english_name,
            symbol=z.symbol,
            date_range=z.date_range_label,
            element=z.element,
            ruling_body=z.ruling_body,
        ),
        solar_term=SolarTermView(
            name=t.name,
            is_minor_term=t.is_minor_term,
            days_until_next=t.days_until_next,
            exact_date=t.exact_date_if_today,
            next_name=t.next_name,
            next_date=t.next_date,
        ),
        year_stem_branch=StemBranchView(
            heavenly_stem=ys.heavenly_stem,
            earthly_branch=ys.earthly_branch,
            label=ys.combined_label,
            zodiac_animal=ys.zodiac_animal,
        ),
        day_stem_branch=StemBranchView(
            heavenly_stem=ds.heavenly_stem,
            earthly_branch=ds.earthly_branch,
            label=ds.combined_label,
            zodiac_animal=ds.zodiac_animal,
        ),
        festivals=[FestivalView(name=f.name, kind=f.kind.value) for f in info.festivals],
    )


def event_view(e: EventRecord) -> EventView:
    return EventView(
        id=e.id,
        calendar_id=e.calendar_id,
        title=e.title,
        start_time=e.start_time,
        end_time=e.end_time,
        is_all_day=e.is_all_day,
        location=e.location,
    )


def day_cell_view(c: DayCell) -> DayCellView:
    return DayCellView(
        date=c.date,
        is_current_month=c.is_current_month,
        is_today=c.is_today,
        event_count=c.event_count,
        events=[event_view(e) for e in c.events],
        info=day_info_view(c.info) if c.info is not None else None,
    )


def month_grid_view(g: MonthGrid) -> MonthGridView:
    return MonthGridView(
        year=g.year,
        month=g.month,
        rows=[[day_cell_view(c) for c in row] for row in g.rows()],
    )


def time_slot_view(s: TimeSlot) -> TimeSlotView:
    ev = s.first_overlapping_event
    return TimeSlotView(
        start=s.slot_start,
        end=s.slot_end,
        is_available=s.is_available,
        event=event_view(ev) if ev is not None else None,
    )


# ============================================================
# Public JSON API (function-style)
# ============================================================
def _parse_date_any(x: str | date) -> date:
    if isinstance(x, date):
        return x
    try:
        return date.fromisoformat(str(x).strip())
    except ValueError as e:
        raise ValueError(f"Invalid date format: {x} (expected YYYY-MM-DD)") from e


@lru_cache(maxsize=1)
def _resolver() -> MultiCalendarResolver:
    return MultiCalendarResolver()


@lru_cache(maxsize=1)
def _builder() -> CalendarGridBuilder:
    return CalendarGridBuilder(_resolver())


def get_calendar_day(date_: str | date) -> Dict[str, Any]:
    d = _parse_date_any(date_)
    info = _resolver().resolve(d)
    return day_info_view(info).model_dump(mode="json")


def get_month_grid(
    year: int,
    month: int,
    events: Sequence[EventRecord] = (),
    *,
    today: Optional[str | date] = None,
) -> Dict[str, Any]:
    t = _parse_date_any(today) if today is not None else None
    grid = _builder().build_month_grid(int(year), int(month), events, today=t)
    log.debug("month grid %04d-%02d cells=%d events=%d", grid.year, grid.month, len(grid.cells), len(events))
    return month_grid_view(grid).model_dump(mode="json")


def get_week_slots(anchor: str | date, events: Sequence[EventRecord] = ()) -> List[Dict[str, Any]]:
    d = _parse_date_any(anchor)
    return [time_slot_view(s).model_dump(mode="json") for s in _builder().build_week_slots(d, events)]


def get_day_agenda(date_: str | date, events: Sequence[EventRecord] = ()) -> Dict[str, Any]:
    d = _parse_date_any(date_)
    agenda = _builder().build_day_agenda(d, events)
    return {
        "date": d.isoformat(),
        "events": [event_view(e).model_dump(mode="json") for e in agenda],
    }
