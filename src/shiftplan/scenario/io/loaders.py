"""Schedule loading utilities (``name:kind:start:end:weekday`` lines)."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from shiftplan.core.errors import ScheduleParseError, ShiftPlanValueError
from shiftplan.core.types import Session, ShiftKind, Weekday, is_half_hour, parse_clock

__all__ = ["load_schedule", "parse_schedule", "parse_line"]

_FIELD_COUNT = 5


def parse_line(line: str, line_no: int, *, allow_weekend: bool = False) -> Session:
    """Parse one schedule line, e.g. ``CPD:L13:08h00:09h30:Mon``."""
    fields = [field.strip() for field in line.split(":")]
    if len(fields) != _FIELD_COUNT:
        raise ScheduleParseError("Expected 5 colon-separated fields", line_no, line)
    name, raw_kind, raw_start, raw_end, raw_day = fields
    if not name:
        raise ScheduleParseError("Missing course name", line_no, line)
    try:
        kind = ShiftKind.parse(raw_kind)
    except ShiftPlanValueError as exc:
        raise ScheduleParseError(str(exc), line_no, line) from exc
    try:
        start = parse_clock(raw_start)
    except ShiftPlanValueError as exc:
        raise ScheduleParseError("Invalid start time", line_no, line) from exc
    try:
        end = parse_clock(raw_end)
    except ShiftPlanValueError as exc:
        raise ScheduleParseError("Invalid end time", line_no, line) from exc
    try:
        weekday = Weekday.parse(raw_day, allow_weekend=allow_weekend)
    except ShiftPlanValueError as exc:
        raise ScheduleParseError("Invalid week day", line_no, line) from exc
    if start >= end:
        raise ScheduleParseError("Start time must be before end time", line_no, line)
    if not (is_half_hour(start) and is_half_hour(end)):
        raise ScheduleParseError("Times must fall on half-hour boundaries", line_no, line)
    return Session(weekday=weekday, kind=kind, start=start, end=end, course=name)


def parse_schedule(lines: Iterable[str], *, allow_weekend: bool = False) -> list[Session]:
    """Parse schedule lines into sessions.

    Blank lines and ``#`` comments are skipped but still counted, so the
    zero-based ``line_no`` of a :class:`ScheduleParseError` points at the
    physical line. Only Mon..Fri are accepted unless ``allow_weekend`` is set.
    """
    sessions: list[Session] = []
    for line_no, raw in enumerate(lines):
        line = raw.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        sessions.append(parse_line(line, line_no, allow_weekend=allow_weekend))
    return sessions


def load_schedule(path: Path | str, *, allow_weekend: bool = False) -> list[Session]:
    """Read and parse a UTF-8 schedule file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        return parse_schedule(handle, allow_weekend=allow_weekend)
