from __future__ import annotations

from datetime import time

import pytest
from pydantic import ValidationError

from shiftplan.core.types import ShiftKind, Weekday
from shiftplan.filters import ShiftRequirement, TimetableFilters, apply_filters, rank_timetables
from shiftplan.scenario.io import load_schedule
from shiftplan.scheduling import ShiftIndex, TimeTable, generate_timetables


@pytest.fixture
def sample_timetables(schedule_file):
    return generate_timetables(ShiftIndex.build(load_schedule(schedule_file)))


def test_empty_filter_set_matches_everything(sample_timetables):
    filters = TimetableFilters()
    assert filters.is_empty
    assert apply_filters(sample_timetables, filters) == sample_timetables


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        (TimetableFilters(free_days={"Fri"}), 2),
        (TimetableFilters(has_the_shift=[{"shift": "T1", "course": "CPD"}]), 2),
        (TimetableFilters(hasnt_the_shift=[{"shift": "T1", "course": "CPD"}]), 4),
        (TimetableFilters(ends_before="16"), 2),
        (TimetableFilters(starts_after="9"), 0),
        (TimetableFilters(starts_after="8", free_days=["Fri"]), 2),
        (
            TimetableFilters(
                has_the_shift=[{"shift": "T2", "course": "CPD"}],
                hasnt_the_shift=[{"shift": "L1", "course": "CPD"}],
            ),
            2,
        ),
    ],
)
def test_predicates_combine_with_and(sample_timetables, filters, expected):
    assert len(apply_filters(sample_timetables, filters)) == expected


def test_filter_field_parsing():
    filters = TimetableFilters(starts_after="8h30", ends_before="17:00", free_days=["mon", 4])
    assert filters.starts_after == time(8, 30)
    assert filters.ends_before == time(17, 0)
    assert filters.free_days == {Weekday.MON, Weekday.FRI}
    assert filters.model_dump(mode="json")["free_days"] == ["Mon", "Fri"]


def test_invalid_filters_are_rejected():
    with pytest.raises(ValidationError):
        TimetableFilters(free_days=["Someday"])
    with pytest.raises(ValidationError):
        ShiftRequirement(shift="X1", course="CPD")
    with pytest.raises(ValidationError):
        ShiftRequirement(shift="T1", course="  ")


def test_shift_requirement_parse():
    requirement = ShiftRequirement.parse("L2:CPD")
    assert requirement.kind == ShiftKind.lab(2)
    assert requirement.course == "CPD"
    assert str(requirement) == "L2:CPD"
    with pytest.raises(ValueError):
        ShiftRequirement.parse("L2")


def test_edits_return_new_filter_sets():
    base = TimetableFilters()
    edited = (
        base.with_starts_after(time(9))
        .with_free_days([Weekday.FRI])
        .require_shift(ShiftRequirement(shift="T1", course="CPD"))
        .forbid_shift(ShiftRequirement(shift="L2", course="ALG"))
    )
    assert base.is_empty
    assert edited.describe() == [
        "starts after 09:00",
        "free on Fri",
        "has T1:CPD",
        "hasn't L2:ALG",
    ]
    cleared = edited.clear_required_shifts().clear_forbidden_shifts().with_starts_after(None)
    assert cleared.has_the_shift == () and cleared.hasnt_the_shift == ()
    assert cleared.describe() == ["free on Fri"]


def test_ranking_orders_by_descending_work_span(make_session):
    short = TimeTable().add(make_session("CPD", "T1", "Mon", "08:00", "09:00"))
    long = short.add(make_session("ALG", "T1", "Wed", "14:00", "15:00"))
    assert short.total_work_span() == 2
    assert long.total_work_span() == 4
    assert rank_timetables([short, long]) == [long, short]


def test_ranking_keeps_ties_in_order(make_session):
    first = TimeTable().add(make_session("CPD", "T1", "Mon", "08:00", "09:00"))
    second = TimeTable().add(make_session("CPD", "T2", "Tue", "10:00", "11:00"))
    third = TimeTable().add(make_session("CPD", "T3", "Wed", "08:00", "10:00"))
    assert rank_timetables([first, second, third]) == [third, first, second]
