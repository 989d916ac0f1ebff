# src/mcal/features/grid.py
from __future__ import annotations

import calendar as pycal
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence, Tuple

from mcal.core.config import GridConfig
from mcal.features.multi_calendar import CombinedDateInfo, MultiCalendarResolver
from mcal.features.records import EventRecord


# ============================================================
# Presentation structures
# ============================================================

@dataclass(frozen=True)
class DayCell:
    date: date
    events: Tuple[EventRecord, ...]
    is_current_month: bool
    is_today: bool = False
    info: Optional[CombinedDateInfo] = None

    @property
    def event_count(self) -> int:
        return len(self.events)


@dataclass(frozen=True)
class TimeSlot:
    slot_start: datetime
    slot_end: datetime
    first_overlapping_event: Optional[EventRecord] = None

    @property
    def is_available(self) -> bool:
        return self.first_overlapping_event is None


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    cells: Tuple[DayCell, ...]
    columns: int = field(default=7, repr=False)

    def rows(self) -> List[Tuple[DayCell, ...]]:
        """Row-major weeks, Sunday first."""
        n = self.columns
        return [self.cells[i:i + n] for i in range(0, len(self.cells), n)]

    def cell_for(self, d: date) -> Optional[DayCell]:
        for c in self.cells:
            if c.date == d:
                return c
        return None


# ============================================================
# Helpers
# ============================================================

def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """(year, month) moved by delta months."""
    k = int(year) * 12 + (int(month) - 1) + int(delta)
    return k // 12, k % 12 + 1


def sunday_weekday(d: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return d.isoweekday() % 7


def week_start_monday(anchor: date) -> date:
    return anchor - timedelta(days=anchor.isoweekday() - 1)


def _events_starting_on(d: date, events: Sequence[EventRecord]) -> Tuple[EventRecord, ...]:
    return tuple(e for e in events if e.start_time.date() == d)


# ============================================================
# Builder
# ============================================================

class CalendarGridBuilder:
    """
    Month / week / day views over an in-memory event sequence.

    With a resolver, month cells carry each date's CombinedDateInfo. Adjacent-month
    cells outside the lunar table get info=None; for current-month cells an
    OutOfRangeError is propagated, never approximated.
    """

    def __init__(
        self,
        resolver: Optional[MultiCalendarResolver] = None,
        *,
        config: GridConfig = GridConfig(),
    ) -> None:
        self.resolver = resolver
        self.config = config

    def _cell(self, d: date, events: Tuple[EventRecord, ...], *, current: bool, today: bool) -> DayCell:
        info = None
        if self.resolver is not None and (current or self._resolvable(d)):
            info = self.resolver.resolve(d)
        return DayCell(date=d, events=events, is_current_month=current, is_today=today, info=info)

    def _resolvable(self, d: date) -> bool:
        first, last = self.resolver.lunar.supported_range
        return first <= d <= last

    def build_month_grid(
        self,
        year: int,
        month: int,
        events: Sequence[EventRecord],
        *,
        today: Optional[date] = None,
    ) -> MonthGrid:
        """
        Fixed 6x7 grid, week starting Sunday. Leading / trailing cells belong
        to the adjacent months and carry no events. today=None marks no cell.
        """
        if not (1 <= int(month) <= 12):
            raise ValueError(f"month must be 1..12 (got {month})")

        first = date(year, month, 1)
        days_in_month = pycal.monthrange(year, month)[1]
        lead = sunday_weekday(first)

        cells: List[DayCell] = []

        for i in range(lead, 0, -1):
            cells.append(self._cell(first - timedelta(days=i), (), current=False, today=False))

        for day in range(1, days_in_month + 1):
            d = date(year, month, day)
            cells.append(self._cell(d, _events_starting_on(d, events), current=True, today=(d == today)))

        last = date(year, month, days_in_month)
        remaining = self.config.cell_count - len(cells)
        for i in range(1, remaining + 1):
            cells.append(self._cell(last + timedelta(days=i), (), current=False, today=False))

        return MonthGrid(year=year, month=month, cells=tuple(cells), columns=self.config.columns)

    def build_week_slots(self, anchor: date, events: Sequence[EventRecord]) -> Tuple[TimeSlot, ...]:
        """
        One slot per hour over the Monday-based week containing anchor.
        Overlap is inclusive on both ends: end >= slot_start and start <= slot_end.
        """
        start = datetime.combine(week_start_monday(anchor), time(0, 0))
        width = timedelta(hours=self.config.slot_hours)
        count = self.config.week_days * 24 // self.config.slot_hours

        slots: List[TimeSlot] = []
        for i in range(count):
            s = start + width * i
            e = s + width
            hit = next((ev for ev in events if ev.end_time >= s and ev.start_time <= e), None)
            slots.append(TimeSlot(slot_start=s, slot_end=e, first_overlapping_event=hit))
        return tuple(slots)

    def build_day_agenda(self, d: date, events: Sequence[EventRecord]) -> Tuple[EventRecord, ...]:
        """Events starting on d, ascending by start time (stable for ties)."""
        return tuple(sorted(_events_starting_on(d, events), key=lambda e: e.start_time))

    def upcoming_events(
        self,
        events: Sequence[EventRecord],
        today: date,
        days: int = 7,
    ) -> Tuple[EventRecord, ...]:
        """Events starting in [today 00:00, today+days 00:00), ascending by start."""
        lo = datetime.combine(today, time(0, 0))
        hi = lo + timedelta(days=int(days))
        return tuple(sorted((e for e in events if lo <= e.start_time < hi), key=lambda e: e.start_time))
