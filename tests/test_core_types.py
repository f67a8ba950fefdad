from __future__ import annotations

from datetime import time

import pytest

from shiftplan.core.errors import ShiftPlanValueError
from shiftplan.core.types import (
    ALL_DAYS,
    Session,
    ShiftKind,
    ShiftTag,
    Weekday,
    index_to_time,
    parse_clock,
    parse_time_of_day,
    time_to_index,
)


def test_weekday_has_seven_stable_ordinals():
    assert len(ALL_DAYS) == 7
    assert [int(day) for day in ALL_DAYS] == list(range(7))
    assert Weekday.MON.abbrev == "Mon"
    assert Weekday.SUN.abbrev == "Sun"


@pytest.mark.parametrize("text", ["mon", "MON", "Mon", " Mon "])
def test_weekday_parse_is_case_insensitive(text):
    assert Weekday.parse(text) is Weekday.MON


def test_weekday_parse_strict_rejects_weekend():
    assert Weekday.parse("Sat") is Weekday.SAT
    with pytest.raises(ShiftPlanValueError):
        Weekday.parse("Sat", allow_weekend=False)
    with pytest.raises(ShiftPlanValueError):
        Weekday.parse("Monday")


def test_shift_kind_parse_and_equality():
    assert ShiftKind.parse("T1") == ShiftKind.lecture(1)
    assert ShiftKind.parse("L13") == ShiftKind(ShiftTag.LAB, 13)
    assert ShiftKind.lecture(1) != ShiftKind.lab(1)
    assert ShiftKind.lab(2).is_lab
    assert not ShiftKind.lecture(2).is_lab
    assert str(ShiftKind.lab(13)) == "L13"


def test_shift_kind_zero_is_distinct_per_tag():
    assert ShiftKind.lecture(0) != ShiftKind.lab(0)
    assert len({ShiftKind.lecture(0), ShiftKind.lab(0)}) == 2


@pytest.mark.parametrize(
    ("text", "message"),
    [("X1", "T or L"), ("", "T or L"), ("T", "shift number"), ("Tx", "shift number")],
)
def test_shift_kind_parse_errors(text, message):
    with pytest.raises(ShiftPlanValueError, match=message):
        ShiftKind.parse(text)


def test_session_requires_half_hour_boundaries():
    with pytest.raises(ShiftPlanValueError):
        Session(Weekday.MON, ShiftKind.lecture(1), time(8, 15), time(9, 0), "CPD")


def test_session_requires_start_before_end():
    with pytest.raises(ShiftPlanValueError):
        Session(Weekday.MON, ShiftKind.lecture(1), time(9, 0), time(9, 0), "CPD")


def test_session_slot_range():
    session = Session(Weekday.MON, ShiftKind.lecture(1), time(8, 0), time(9, 30), "CPD")
    assert list(session.slot_range) == [16, 17, 18]


def test_time_index_round_trip_edges():
    assert time_to_index(time(0, 0)) == 0
    assert time_to_index(time(23, 30)) == 47
    assert index_to_time(19) == time(9, 30)
    with pytest.raises(ShiftPlanValueError):
        index_to_time(48)


def test_parse_clock():
    assert parse_clock("08h00") == time(8, 0)
    assert parse_clock("9h30") == time(9, 30)
    for bad in ("08:00", "25h00", "08h75"):
        with pytest.raises(ShiftPlanValueError):
            parse_clock(bad)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("8", time(8, 0)),
        ("14", time(14, 0)),
        ("8h30", time(8, 30)),
        ("08:30", time(8, 30)),
        ("08:30:00", time(8, 30)),
    ],
)
def test_parse_time_of_day(text, expected):
    assert parse_time_of_day(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "99", "8:61"])
def test_parse_time_of_day_rejects_garbage(text):
    with pytest.raises(ShiftPlanValueError):
        parse_time_of_day(text)
