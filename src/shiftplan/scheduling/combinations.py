"""Backtracking enumeration of every clash-free timetable."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from shiftplan.core.errors import PlacementConflict
from shiftplan.scheduling.shifts import CourseKey, ShiftIndex
from shiftplan.scheduling.timetable import TimeTable


@dataclass(slots=True)
class SearchStats:
    """Counters collected while enumerating timetables.

    Attributes
    ----------
    placements:
        Shift alternatives successfully placed (search tree edges explored).
    pruned:
        Alternatives rejected because they clashed with the partial timetable.
    results:
        Complete timetables produced.
    """

    placements: int = 0
    pruned: int = 0
    results: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"placements": self.placements, "pruned": self.pruned, "results": self.results}


def iter_timetables(index: ShiftIndex, *, stats: SearchStats | None = None) -> Iterator[TimeTable]:
    """Lazily yield every timetable picking one alternative per ``(course, is_lab)``.

    An empty index yields exactly one empty timetable.
    """
    stats = stats if stats is not None else SearchStats()
    keys = list(index)
    yield from _gather(index, TimeTable(), keys, stats)


def _gather(
    index: ShiftIndex,
    timetable: TimeTable,
    remaining: Sequence[CourseKey],
    stats: SearchStats,
) -> Iterator[TimeTable]:
    if not remaining:
        stats.results += 1
        yield timetable
        return
    course, *others = remaining
    for group in index[course].values():
        try:
            candidate = timetable.add(group)
        except PlacementConflict:
            stats.pruned += 1
            continue
        stats.placements += 1
        yield from _gather(index, candidate, others, stats)


def generate_timetables(index: ShiftIndex, *, stats: SearchStats | None = None) -> list[TimeTable]:
    """Materialise :func:`iter_timetables` into a list."""
    return list(iter_timetables(index, stats=stats))


__all__ = ["SearchStats", "iter_timetables", "generate_timetables"]
