"""iCalendar export of a single timetable."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path

from ics import Calendar, Event

from shiftplan.core.errors import ShiftPlanValueError
from shiftplan.core.types import Weekday
from shiftplan.scheduling.timetable import TimeTable


def first_occurrence(start_date: date, weekday: Weekday) -> date:
    """First date on or after ``start_date`` that falls on ``weekday``."""
    return start_date + timedelta(days=(int(weekday) - start_date.weekday()) % 7)


def _wall_clock(day: date, at: time, tz: tzinfo | None) -> datetime:
    # ics writes every instant in UTC, so the wall-clock time needs a zone first.
    moment = datetime.combine(day, at)
    if tz is None:
        return moment.astimezone()
    return moment.replace(tzinfo=tz)


def build_calendar(
    timetable: TimeTable,
    start_date: date,
    end_date: date,
    *,
    tz: tzinfo | None = None,
) -> Calendar:
    """Repeat every class of ``timetable`` weekly between the two dates (inclusive).

    Class times are wall-clock times in ``tz``; ``None`` uses the local zone.
    """
    if end_date < start_date:
        raise ShiftPlanValueError("End date must not be before start date")
    calendar = Calendar()
    for block in timetable.blocks():
        day = first_occurrence(start_date, block.weekday)
        while day <= end_date:
            calendar.events.add(
                Event(
                    name=f"{block.course} {block.kind}",
                    begin=_wall_clock(day, block.start, tz),
                    end=_wall_clock(day, block.end, tz),
                )
            )
            day += timedelta(weeks=1)
    return calendar


def write_calendar(
    path: Path | str,
    timetable: TimeTable,
    start_date: date,
    end_date: date,
    *,
    tz: tzinfo | None = None,
) -> int:
    """Write the calendar to ``path`` and return the number of events."""
    calendar = build_calendar(timetable, start_date, end_date, tz=tz)
    path = Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(calendar.serialize(), encoding="utf-8")
    return len(calendar.events)


__all__ = ["build_calendar", "first_occurrence", "write_calendar"]
