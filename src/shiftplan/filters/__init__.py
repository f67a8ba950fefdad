"""Timetable filter predicates, ranking and persistence."""

from .io import load_filters, save_filters
from .models import ShiftRequirement, TimetableFilters, apply_filters, rank_timetables

__all__ = [
    "ShiftRequirement",
    "TimetableFilters",
    "apply_filters",
    "rank_timetables",
    "load_filters",
    "save_filters",
]
