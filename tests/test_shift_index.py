from __future__ import annotations

import pytest

from shiftplan.core.types import ShiftKind
from shiftplan.scenario.io import parse_schedule
from shiftplan.scheduling import ClassGroup, ShiftIndex


def test_build_groups_by_course_component_and_kind(make_session):
    sessions = [
        make_session("CPD", "T1", "Mon", "08:00", "09:30"),
        make_session("CPD", "L1", "Tue", "10:00", "11:00"),
        make_session("CPD", "T1", "Wed", "08:00", "09:30"),
        make_session("CPD", "T2", "Thu", "08:00", "09:30"),
        make_session("ALG", "L1", "Fri", "10:00", "11:00"),
    ]
    index = ShiftIndex.build(sessions)

    assert list(index) == [("CPD", False), ("CPD", True), ("ALG", True)]
    lectures = index[("CPD", False)]
    assert set(lectures) == {ShiftKind.lecture(1), ShiftKind.lecture(2)}
    t1 = lectures[ShiftKind.lecture(1)]
    assert isinstance(t1, ClassGroup)
    assert t1.course == "CPD"
    assert [s.weekday.abbrev for s in t1] == ["Mon", "Wed"]
    assert not t1.is_lab
    assert index[("ALG", True)][ShiftKind.lab(1)].is_lab


def test_every_session_lands_in_exactly_one_group(schedule_file):
    sessions = parse_schedule(schedule_file.read_text().splitlines())
    index = ShiftIndex.build(sessions)
    grouped = [
        s for alternatives in index.values() for group in alternatives.values() for s in group
    ]
    assert sorted(grouped, key=repr) == sorted(sessions, key=repr)
    assert index.session_count() == len(sessions)


def test_lecture_and_lab_with_same_number_stay_apart(make_session):
    index = ShiftIndex.build(
        [
            make_session("CPD", "T0", "Mon", "08:00", "09:00"),
            make_session("CPD", "L0", "Mon", "10:00", "11:00"),
        ]
    )
    assert index[("CPD", False)].keys() == {ShiftKind.lecture(0)}
    assert index[("CPD", True)].keys() == {ShiftKind.lab(0)}
    assert index.kinds_for("CPD") == {ShiftKind.lecture(0), ShiftKind.lab(0)}


def test_empty_index():
    index = ShiftIndex.build([])
    assert len(index) == 0
    assert index.courses == []
    assert index.alternative_count() == 1


def test_alternative_count_and_courses(schedule_file):
    index = ShiftIndex.build(parse_schedule(schedule_file.read_text().splitlines()))
    assert index.courses == ["ALG", "CPD"]
    assert index.alternative_count() == 2 * 2 * 1 * 2


def test_index_is_read_only(make_session):
    index = ShiftIndex.build([make_session("CPD", "T1", "Mon", "08:00", "09:00")])
    with pytest.raises(TypeError):
        index[("CPD", False)][ShiftKind.lecture(9)] = None  # type: ignore[index]
