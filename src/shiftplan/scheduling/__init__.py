"""Scheduling engine (shift index, week grid, combination search)."""

from .combinations import SearchStats, generate_timetables, iter_timetables
from .shifts import ClassGroup, CourseKey, ShiftIndex
from .timetable import COLORS, OccupiedBlock, Placement, TimeTable

__all__ = [
    "ClassGroup",
    "CourseKey",
    "ShiftIndex",
    "COLORS",
    "OccupiedBlock",
    "Placement",
    "TimeTable",
    "SearchStats",
    "generate_timetables",
    "iter_timetables",
]
