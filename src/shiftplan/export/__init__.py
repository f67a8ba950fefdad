"""Timetable exporters."""

from .ical import build_calendar, first_occurrence, write_calendar

__all__ = ["build_calendar", "first_occurrence", "write_calendar"]
