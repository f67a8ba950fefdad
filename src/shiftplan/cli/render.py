"""Rich rendering of timetables."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from shiftplan.core.types import ALL_DAYS, Weekday, index_to_time
from shiftplan.scheduling.timetable import TimeTable


def visible_days(timetable: TimeTable) -> list[Weekday]:
    """Mon..Fri, plus weekend days that hold classes."""
    return [day for day in ALL_DAYS if not day.is_weekend or not timetable.free_day(day)]


def render_timetable(timetable: TimeTable, *, title: str | None = None) -> Table:
    """Build a rich table with one row per half-hour between the first and last class.

    Lectures are painted on the course colour, labs in the course colour.
    """
    days = visible_days(timetable)
    table = Table(title=title, show_lines=False)
    table.add_column("Time", style="dim", no_wrap=True)
    for day in days:
        table.add_column(day.abbrev, no_wrap=True)

    bounds = timetable.occupied_range()
    if bounds is None:
        return table
    first, last = bounds
    for index in range(first, last + 1):
        cells: list[Text | str] = [f"{index_to_time(index):%H:%M}"]
        for day in days:
            slot = timetable.day(day)[index]
            if slot is None:
                cells.append("")
                continue
            color = timetable.colors.get(slot.course, "white")
            style = f"on {color}" if not slot.kind.is_lab else color
            cells.append(Text(f"{slot.kind} {slot.course}", style=style))
        table.add_row(*cells)
    return table


__all__ = ["render_timetable", "visible_days"]
