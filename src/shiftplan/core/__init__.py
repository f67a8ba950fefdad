"""Core utilities shared across shiftplan modules."""

from .errors import PlacementConflict, ScheduleParseError, ShiftPlanError, ShiftPlanValueError
from .types import (
    ALL_DAYS,
    SLOTS_PER_DAY,
    WEEKDAYS,
    Session,
    ShiftKind,
    ShiftTag,
    Weekday,
    index_to_time,
    parse_clock,
    parse_time_of_day,
    time_to_index,
)

__all__ = [
    "ShiftPlanError",
    "ShiftPlanValueError",
    "ScheduleParseError",
    "PlacementConflict",
    "ALL_DAYS",
    "SLOTS_PER_DAY",
    "WEEKDAYS",
    "Session",
    "ShiftKind",
    "ShiftTag",
    "Weekday",
    "index_to_time",
    "parse_clock",
    "parse_time_of_day",
    "time_to_index",
]
