"""Value types shared by the parser, the timetable grid and the filters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from enum import Enum, IntEnum

from .errors import ShiftPlanValueError

WEEKDAYS = 7
SLOTS_PER_DAY = 24 * 2

_SHIFT_KIND_RE = re.compile(r"^([TL])([0-9]+)$")
_CLOCK_RE = re.compile(r"^(\d{1,2})h(\d{2})$")


class Weekday(IntEnum):
    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @property
    def abbrev(self) -> str:
        return self.name.capitalize()

    @property
    def is_weekend(self) -> bool:
        return self >= Weekday.SAT

    @classmethod
    def parse(cls, text: str, *, allow_weekend: bool = True) -> "Weekday":
        """Parse a case-insensitive three letter abbreviation (``Mon`` .. ``Sun``)."""
        key = text.strip().upper()
        try:
            day = cls[key]
        except KeyError:
            raise ShiftPlanValueError(f"Invalid week day '{text}'") from None
        if day.is_weekend and not allow_weekend:
            raise ShiftPlanValueError(f"Invalid week day '{text}'")
        return day


ALL_DAYS: tuple[Weekday, ...] = tuple(Weekday)


class ShiftTag(str, Enum):
    LECTURE = "T"
    LAB = "L"


@dataclass(frozen=True, slots=True)
class ShiftKind:
    """A lecture (``T``) or lab (``L``) shift offering and its number."""

    tag: ShiftTag
    number: int

    def __post_init__(self) -> None:
        if self.number < 0:
            raise ShiftPlanValueError("Invalid shift number")

    @classmethod
    def lecture(cls, number: int) -> "ShiftKind":
        return cls(ShiftTag.LECTURE, number)

    @classmethod
    def lab(cls, number: int) -> "ShiftKind":
        return cls(ShiftTag.LAB, number)

    @classmethod
    def parse(cls, text: str) -> "ShiftKind":
        value = text.strip()
        if not value or value[0] not in "TL":
            raise ShiftPlanValueError("Shift kind needs to be T or L")
        match = _SHIFT_KIND_RE.match(value)
        if match is None:
            raise ShiftPlanValueError("Invalid shift number")
        return cls(ShiftTag(match.group(1)), int(match.group(2)))

    @property
    def is_lab(self) -> bool:
        return self.tag is ShiftTag.LAB

    def __str__(self) -> str:
        return f"{self.tag.value}{self.number}"


def is_half_hour(t: time) -> bool:
    return t.minute in (0, 30) and t.second == 0 and t.microsecond == 0


@dataclass(frozen=True, slots=True)
class Session:
    """One weekly meeting of a course shift."""

    weekday: Weekday
    kind: ShiftKind
    start: time
    end: time
    course: str

    def __post_init__(self) -> None:
        if not is_half_hour(self.start) or not is_half_hour(self.end):
            raise ShiftPlanValueError(
                f"Session {self.course} {self.kind} must start and end on half-hour boundaries"
            )
        if self.start >= self.end:
            raise ShiftPlanValueError(
                f"Session {self.course} {self.kind} must start before it ends"
            )

    @property
    def slot_range(self) -> range:
        return range(time_to_index(self.start), time_to_index(self.end))


def time_to_index(t: time) -> int:
    """Return the half-hour slot index (0..47) holding ``t``."""
    return t.hour * 2 + t.minute // 30


def index_to_time(index: int) -> time:
    if not 0 <= index < SLOTS_PER_DAY:
        raise ShiftPlanValueError(f"Slot index {index} outside 0..{SLOTS_PER_DAY - 1}")
    return time(index // 2, (index % 2) * 30)


def parse_clock(text: str) -> time:
    """Parse the ``HHhMM`` clock format used by schedule files."""
    match = _CLOCK_RE.match(text.strip())
    if match is None:
        raise ShiftPlanValueError(f"Invalid time '{text}', expected HHhMM")
    hour, minute = int(match.group(1)), int(match.group(2))
    try:
        return time(hour, minute)
    except ValueError as exc:
        raise ShiftPlanValueError(f"Invalid time '{text}'") from exc


def parse_time_of_day(text: str) -> time:
    """Parse a loosely formatted time typed by a user.

    Accepts a bare hour (``"8"``, ``"14"``), ``"8h30"``, ``"08:30"`` and
    ``"08:30:00"``.
    """
    value = text.strip()
    try:
        if len(value) < 3 and value.isdigit():
            return time(int(value))
        if "h" in value:
            return parse_clock(value)
        if value.count(":") in (1, 2):
            parts = [int(part) for part in value.split(":")]
            return time(*parts)
    except ValueError as exc:
        raise ShiftPlanValueError(f"Invalid time '{text}'") from exc
    raise ShiftPlanValueError(f"Invalid time '{text}'")


__all__ = [
    "WEEKDAYS",
    "SLOTS_PER_DAY",
    "ALL_DAYS",
    "Weekday",
    "ShiftTag",
    "ShiftKind",
    "Session",
    "is_half_hour",
    "time_to_index",
    "index_to_time",
    "parse_clock",
    "parse_time_of_day",
]
