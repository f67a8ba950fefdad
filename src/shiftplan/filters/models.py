"""Pydantic filter set evaluated against generated timetables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import time
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from shiftplan.core.types import ShiftKind, Weekday, parse_time_of_day
from shiftplan.scheduling.timetable import TimeTable


class ShiftRequirement(BaseModel):
    """A shift of a course, e.g. ``T1`` of ``CPD``.

    Attributes
    ----------
    shift:
        Shift label matching ``^[TL][0-9]+$``; normalised on validation.
    course:
        Course name as written in the schedule file.
    """

    model_config = ConfigDict(frozen=True)

    shift: str
    course: str

    @field_validator("shift")
    @classmethod
    def _valid_shift(cls, value: str) -> str:
        return str(ShiftKind.parse(value))

    @field_validator("course")
    @classmethod
    def _course_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("course must not be empty")
        return value

    @property
    def kind(self) -> ShiftKind:
        return ShiftKind.parse(self.shift)

    @classmethod
    def parse(cls, text: str) -> "ShiftRequirement":
        """Parse ``KIND:COURSE`` (``T1:CPD``)."""
        if ":" not in text:
            raise ValueError(f"Shift requirement must be KIND:COURSE (got '{text}')")
        shift, course = text.split(":", 1)
        return cls(shift=shift, course=course)

    def __str__(self) -> str:
        return f"{self.shift}:{self.course}"


class TimetableFilters(BaseModel):
    """Independent predicates combined with logical AND.

    Unset bounds and empty collections hold trivially. Instances are frozen:
    every ``with_*``/``require_*``/``forbid_*``/``clear_*`` method returns a
    new filter set.
    """

    model_config = ConfigDict(frozen=True)

    starts_after: time | None = None
    ends_before: time | None = None
    free_days: frozenset[Weekday] = frozenset()
    has_the_shift: tuple[ShiftRequirement, ...] = ()
    hasnt_the_shift: tuple[ShiftRequirement, ...] = ()

    @field_validator("starts_after", "ends_before", mode="before")
    @classmethod
    def _parse_bound(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_time_of_day(value) if value.strip() else None
        return value

    @field_validator("free_days", mode="before")
    @classmethod
    def _parse_days(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, (str, int)):
            value = [value]
        days = []
        for item in value:
            if isinstance(item, str):
                days.append(Weekday.parse(item))
            else:
                days.append(Weekday(item))
        return frozenset(days)

    @field_serializer("free_days")
    def _dump_days(self, days: frozenset[Weekday]) -> list[str]:
        return [day.abbrev for day in sorted(days)]

    def matches(self, timetable: TimeTable) -> bool:
        return (
            (self.starts_after is None or timetable.starts_after(self.starts_after))
            and (self.ends_before is None or timetable.ends_before(self.ends_before))
            and all(timetable.free_day(day) for day in self.free_days)
            and all(timetable.has_the_shift(req.kind, req.course) for req in self.has_the_shift)
            and all(
                timetable.hasnt_the_shift(req.kind, req.course) for req in self.hasnt_the_shift
            )
        )

    @property
    def is_empty(self) -> bool:
        return self == TimetableFilters()

    def with_starts_after(self, value: time | None) -> "TimetableFilters":
        return self.model_copy(update={"starts_after": value})

    def with_ends_before(self, value: time | None) -> "TimetableFilters":
        return self.model_copy(update={"ends_before": value})

    def with_free_days(self, days: Iterable[Weekday]) -> "TimetableFilters":
        return self.model_copy(update={"free_days": frozenset(days)})

    def require_shift(self, requirement: ShiftRequirement) -> "TimetableFilters":
        return self.model_copy(update={"has_the_shift": (*self.has_the_shift, requirement)})

    def forbid_shift(self, requirement: ShiftRequirement) -> "TimetableFilters":
        return self.model_copy(update={"hasnt_the_shift": (*self.hasnt_the_shift, requirement)})

    def clear_required_shifts(self) -> "TimetableFilters":
        return self.model_copy(update={"has_the_shift": ()})

    def clear_forbidden_shifts(self) -> "TimetableFilters":
        return self.model_copy(update={"hasnt_the_shift": ()})

    def describe(self) -> list[str]:
        """One human-readable line per active predicate."""
        lines: list[str] = []
        if self.starts_after is not None:
            lines.append(f"starts after {self.starts_after:%H:%M}")
        if self.ends_before is not None:
            lines.append(f"ends before {self.ends_before:%H:%M}")
        if self.free_days:
            lines.append("free on " + ", ".join(day.abbrev for day in sorted(self.free_days)))
        lines.extend(f"has {req}" for req in self.has_the_shift)
        lines.extend(f"hasn't {req}" for req in self.hasnt_the_shift)
        return lines


def apply_filters(timetables: Iterable[TimeTable], filters: TimetableFilters) -> list[TimeTable]:
    return [timetable for timetable in timetables if filters.matches(timetable)]


def rank_timetables(timetables: Sequence[TimeTable]) -> list[TimeTable]:
    """Order timetables by descending total work span; ties keep their order."""
    return sorted(timetables, key=lambda timetable: -timetable.total_work_span())


__all__ = ["ShiftRequirement", "TimetableFilters", "apply_filters", "rank_timetables"]
