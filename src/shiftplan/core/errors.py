"""Common shiftplan-specific exceptions."""

from __future__ import annotations

from datetime import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shiftplan.core.types import Weekday


class ShiftPlanError(Exception):
    """Base class for every error raised by shiftplan."""


class ShiftPlanValueError(ShiftPlanError, ValueError):
    """Raised when shiftplan detects invalid user-provided data."""


class ScheduleParseError(ShiftPlanValueError):
    """A schedule line could not be turned into a session.

    Attributes
    ----------
    line_no:
        Zero-based line number within the schedule source.
    line:
        Raw text of the offending line.
    note:
        Human-readable reason.
    """

    def __init__(self, note: str, line_no: int, line: str) -> None:
        self.note = note
        self.line_no = line_no
        self.line = line
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Parse error in line {self.line_no}\nLine {self.line}\nNote: {self.note}"


class PlacementConflict(ShiftPlanError):
    """A session overlaps a slot that is already occupied in a timetable.

    Attributes
    ----------
    weekday:
        Day on which the overlap happens.
    time_range:
        Half-open ``(start, end)`` range of the overlapping slots.
    existing_course / incoming_course:
        Course already placed in the grid and the course being added.
    """

    def __init__(
        self,
        weekday: Weekday,
        time_range: tuple[time, time],
        existing_course: str,
        incoming_course: str,
    ) -> None:
        self.weekday = weekday
        self.time_range = time_range
        self.existing_course = existing_course
        self.incoming_course = incoming_course
        start, end = time_range
        super().__init__(
            f"{incoming_course} overlaps {existing_course} on {weekday.abbrev} "
            f"{start:%H:%M}-{end:%H:%M}"
        )

    @property
    def courses(self) -> frozenset[str]:
        return frozenset({self.existing_course, self.incoming_course})


__all__ = ["ShiftPlanError", "ShiftPlanValueError", "ScheduleParseError", "PlacementConflict"]
