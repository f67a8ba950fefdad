from __future__ import annotations

from itertools import combinations, islice

from shiftplan.core.types import ALL_DAYS, ShiftKind
from shiftplan.scenario.io import load_schedule
from shiftplan.scheduling import (
    SearchStats,
    ShiftIndex,
    generate_timetables,
    iter_timetables,
)


def test_empty_index_yields_one_empty_timetable():
    stats = SearchStats()
    timetables = generate_timetables(ShiftIndex.build([]), stats=stats)
    assert len(timetables) == 1
    assert all(timetables[0].free_day(day) for day in ALL_DAYS)
    assert stats.results == 1 and stats.pruned == 0


def test_without_conflicts_every_combination_is_produced(make_session):
    sessions = [
        make_session("CPD", "T1", "Mon", "08:00", "09:00"),
        make_session("CPD", "T2", "Tue", "08:00", "09:00"),
        make_session("CPD", "L1", "Wed", "08:00", "09:00"),
        make_session("ALG", "T1", "Thu", "08:00", "09:00"),
        make_session("ALG", "L1", "Fri", "08:00", "09:00"),
        make_session("ALG", "L2", "Fri", "10:00", "11:00"),
    ]
    index = ShiftIndex.build(sessions)
    timetables = generate_timetables(index)
    assert len(timetables) == 2 * 1 * 1 * 2 == index.alternative_count()
    picked = {
        (
            _chosen_kind(table, "CPD", lab=False),
            _chosen_kind(table, "ALG", lab=True),
        )
        for table in timetables
    }
    assert picked == {
        (ShiftKind.lecture(1), ShiftKind.lab(1)),
        (ShiftKind.lecture(1), ShiftKind.lab(2)),
        (ShiftKind.lecture(2), ShiftKind.lab(1)),
        (ShiftKind.lecture(2), ShiftKind.lab(2)),
    }


def _chosen_kind(table, course: str, *, lab: bool) -> ShiftKind:
    (kind,) = [k for c, k in table.placed_shifts() if c == course and k.is_lab == lab]
    return kind


def test_sample_schedule_prunes_clashing_branches(schedule_file):
    index = ShiftIndex.build(load_schedule(schedule_file))
    stats = SearchStats()
    timetables = generate_timetables(index, stats=stats)
    assert index.alternative_count() == 8
    assert len(timetables) == 6
    assert stats.pruned == 2
    assert stats.results == 6
    assert stats.placements == 16


def test_each_timetable_picks_one_alternative_per_group(schedule_file):
    index = ShiftIndex.build(load_schedule(schedule_file))
    for table in generate_timetables(index):
        shifts = table.placed_shifts()
        keys = [(course, kind.is_lab) for course, kind in shifts]
        assert sorted(keys) == sorted(index)


def test_produced_timetables_never_overlap(schedule_file):
    sessions = load_schedule(schedule_file)
    index = ShiftIndex.build(sessions)
    for table in generate_timetables(index):
        chosen = [
            session
            for session in sessions
            if table.has_the_shift(session.kind, session.course)
        ]
        for a, b in combinations(chosen, 2):
            if a.weekday == b.weekday:
                assert a.end <= b.start or b.end <= a.start


def test_iteration_can_be_cut_short(schedule_file):
    index = ShiftIndex.build(load_schedule(schedule_file))
    stats = SearchStats()
    first_two = list(islice(iter_timetables(index, stats=stats), 2))
    assert len(first_two) == 2
    assert stats.results == 2


def test_stats_as_dict():
    assert SearchStats(placements=3, pruned=1, results=2).as_dict() == {
        "placements": 3,
        "pruned": 1,
        "results": 2,
    }
