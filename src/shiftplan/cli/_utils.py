"""CLI helper utilities for shiftplan."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from pydantic import ValidationError

from shiftplan.core.errors import ShiftPlanValueError
from shiftplan.core.types import Weekday, parse_time_of_day
from shiftplan.filters import ShiftRequirement, TimetableFilters


def parse_shift_requirements(shift_args: Sequence[str] | None) -> list[ShiftRequirement]:
    """Parse ``KIND:COURSE`` strings (``T1:CPD``) into requirements."""
    requirements: list[ShiftRequirement] = []
    if not shift_args:
        return requirements
    for arg in shift_args:
        try:
            requirements.append(ShiftRequirement.parse(arg))
        except (ValueError, ValidationError) as exc:
            raise typer.BadParameter(
                f"Shift must be in KIND:COURSE format with KIND like T1 or L2 (got '{arg}')"
            ) from exc
    return requirements


def parse_weekdays(day_args: Sequence[str] | None) -> set[Weekday]:
    """Parse weekday abbreviations; comma separated values are split."""
    days: set[Weekday] = set()
    if not day_args:
        return days
    for arg in day_args:
        for part in arg.split(","):
            if not part.strip():
                continue
            try:
                days.add(Weekday.parse(part))
            except ShiftPlanValueError as exc:
                raise typer.BadParameter(str(exc)) from exc
    return days


def parse_time_option(value: str | None) -> time | None:
    if value is None:
        return None
    try:
        return parse_time_of_day(value)
    except ShiftPlanValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def parse_date_option(value: str) -> date:
    """Parse ``YYYY-MM-DD``."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise typer.BadParameter(f"Dates must be YYYY-MM-DD (got '{value}')") from exc


def parse_timezone_option(value: str | None) -> ZoneInfo | None:
    """Parse an IANA zone name (``Europe/Lisbon``); ``None`` keeps the local zone."""
    if value is None:
        return None
    try:
        return ZoneInfo(value.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise typer.BadParameter(f"Unknown time zone '{value}'") from exc


def build_filters(
    base: TimetableFilters,
    *,
    starts_after: str | None = None,
    ends_before: str | None = None,
    free_days: Sequence[str] | None = None,
    has_shift: Sequence[str] | None = None,
    hasnt_shift: Sequence[str] | None = None,
) -> TimetableFilters:
    """Layer command-line filter options on top of ``base``."""
    filters = base
    start_bound = parse_time_option(starts_after)
    if start_bound is not None:
        filters = filters.with_starts_after(start_bound)
    end_bound = parse_time_option(ends_before)
    if end_bound is not None:
        filters = filters.with_ends_before(end_bound)
    days = parse_weekdays(free_days)
    if days:
        filters = filters.with_free_days(filters.free_days | days)
    for requirement in parse_shift_requirements(has_shift):
        filters = filters.require_shift(requirement)
    for requirement in parse_shift_requirements(hasnt_shift):
        filters = filters.forbid_shift(requirement)
    return filters


__all__ = [
    "build_filters",
    "parse_date_option",
    "parse_shift_requirements",
    "parse_time_option",
    "parse_timezone_option",
    "parse_weekdays",
]
