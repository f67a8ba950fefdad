from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from shiftplan.core.types import Session, ShiftKind, Weekday, parse_time_of_day

# CPD: 2 lectures x 2 labs, ALG: 1 lecture x 2 labs. ALG L1 clashes with CPD T1
# on Monday morning, so 6 of the 8 combinations survive.
SAMPLE_SCHEDULE = """\
# course:shift:start:end:weekday
CPD:T1:08h00:09h30:Mon
CPD:T1:08h00:09h30:Wed
CPD:T2:14h00:15h30:Mon
CPD:T2:14h00:15h30:Wed
CPD:L1:10h00:11h30:Tue
CPD:L2:10h00:11h30:Thu

ALG:T1:08h00:09h30:Tue
ALG:L1:08h00:09h00:Mon
ALG:L2:16h00:17h00:Fri
"""


@pytest.fixture
def make_session():
    """Factory: ``make_session("CPD", "T1", "Mon", "08:00", "09:30")``."""

    def _make(course: str, kind: str, day: str, start: str, end: str) -> Session:
        return Session(
            weekday=Weekday.parse(day),
            kind=ShiftKind.parse(kind),
            start=parse_time_of_day(start),
            end=parse_time_of_day(end),
            course=course,
        )

    return _make


@pytest.fixture
def schedule_file(tmp_path: Path) -> Path:
    path = tmp_path / "schedule.txt"
    path.write_text(SAMPLE_SCHEDULE, encoding="utf-8")
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
