"""Half-hour week grid with conflict-checked placement."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import time
from functools import reduce
from types import MappingProxyType

from shiftplan.core.errors import PlacementConflict
from shiftplan.core.types import (
    ALL_DAYS,
    SLOTS_PER_DAY,
    Session,
    ShiftKind,
    Weekday,
    index_to_time,
    time_to_index,
)
from shiftplan.scheduling.shifts import ClassGroup

COLORS: tuple[str, ...] = ("red", "green", "yellow", "blue", "magenta", "cyan")


@dataclass(frozen=True, slots=True)
class Placement:
    """Occupant of a filled slot; ``placement_id`` tells apart equal-looking fills."""

    kind: ShiftKind
    course: str
    placement_id: int


@dataclass(frozen=True, slots=True)
class OccupiedBlock:
    """A contiguous run of slots filled by one placement."""

    weekday: Weekday
    start: time
    end: time
    kind: ShiftKind
    course: str


Day = tuple[Placement | None, ...]
_EMPTY_DAY: Day = (None,) * SLOTS_PER_DAY


class TimeTable:
    """Immutable 7 x 48 grid of half-hour slots.

    ``TimeTable()`` is the empty week. :meth:`add` never mutates the receiver;
    it returns a new grid or raises :class:`PlacementConflict`, so sibling
    branches of a search can share a parent grid safely.

    Parameters
    ----------
    days:
        Seven tuples of 48 slots each (``None`` for an empty slot).
    colors:
        Display colour per course, assigned in order of first placement.
    next_placement_id:
        Identifier stamped on the next successful placement.
    """

    __slots__ = ("_days", "_colors", "next_placement_id")

    def __init__(
        self,
        days: tuple[Day, ...] | None = None,
        colors: Mapping[str, str] | None = None,
        next_placement_id: int = 0,
    ) -> None:
        if days is None:
            days = (_EMPTY_DAY,) * len(ALL_DAYS)
        if len(days) != len(ALL_DAYS) or any(len(day) != SLOTS_PER_DAY for day in days):
            raise ValueError("TimeTable requires 7 days of 48 slots")
        self._days = days
        self._colors = MappingProxyType(dict(colors or {}))
        self.next_placement_id = next_placement_id

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def add(self, item: Session | ClassGroup) -> "TimeTable":
        """Return a new grid with ``item`` placed.

        A :class:`ClassGroup` is placed session by session and rejected as a
        whole at its first conflict.
        """
        if isinstance(item, ClassGroup):
            return reduce(lambda table, session: table._place(session), item.sessions, self)
        return self._place(item)

    def _place(self, session: Session) -> "TimeTable":
        weekday = session.weekday
        day = self._days[weekday]
        start = time_to_index(session.start)
        end = time_to_index(session.end)
        clashes = [index for index in range(start, end) if day[index] is not None]
        if clashes:
            existing = day[clashes[0]]
            assert existing is not None
            raise PlacementConflict(
                weekday,
                (index_to_time(clashes[0]), index_to_time(clashes[-1] + 1)),
                existing.course,
                session.course,
            )

        placement = Placement(session.kind, session.course, self.next_placement_id)
        filled = day[:start] + (placement,) * (end - start) + day[end:]
        days = self._days[:weekday] + (filled,) + self._days[weekday + 1 :]
        colors: Mapping[str, str] = self._colors
        if session.course not in colors:
            colors = {**colors, session.course: COLORS[len(colors) % len(COLORS)]}
        return TimeTable(days, colors, self.next_placement_id + 1)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def colors(self) -> Mapping[str, str]:
        return self._colors

    @property
    def is_empty(self) -> bool:
        return all(self.free_day(day) for day in ALL_DAYS)

    def day(self, weekday: Weekday) -> Day:
        return self._days[weekday]

    def starts_after(self, t: time) -> bool:
        """True iff every slot strictly before ``t`` is empty on every day."""
        index = time_to_index(t)
        return all(slot is None for day in self._days for slot in day[:index])

    def ends_before(self, t: time) -> bool:
        """True iff every slot at or after ``t`` is empty on every day."""
        index = time_to_index(t)
        return all(slot is None for day in self._days for slot in day[index:])

    def free_day(self, weekday: Weekday) -> bool:
        return all(slot is None for slot in self._days[weekday])

    def has_the_shift(self, kind: ShiftKind, course: str) -> bool:
        return any(
            slot is not None and slot.kind == kind and slot.course == course
            for day in self._days
            for slot in day
        )

    def hasnt_the_shift(self, kind: ShiftKind, course: str) -> bool:
        return not self.has_the_shift(kind, course)

    def work_span(self, weekday: Weekday) -> int:
        """Half-hours from the start of the first class to the end of the last one.

        Gaps between classes count towards the span; an empty day spans 0.
        """
        occupied = [index for index, slot in enumerate(self._days[weekday]) if slot is not None]
        if not occupied:
            return 0
        return occupied[-1] - occupied[0] + 1

    def total_work_span(self) -> int:
        return sum(self.work_span(day) for day in ALL_DAYS)

    def placement_count(self) -> int:
        return len({slot.placement_id for day in self._days for slot in day if slot is not None})

    def placed_shifts(self) -> list[tuple[str, ShiftKind]]:
        shifts = {
            (slot.course, slot.kind) for day in self._days for slot in day if slot is not None
        }
        return sorted(shifts, key=lambda item: (item[0], item[1].tag.value, item[1].number))

    def occupied_range(self) -> tuple[int, int] | None:
        """First and last occupied slot index across the whole week."""
        occupied = [
            index
            for day in self._days
            for index, slot in enumerate(day)
            if slot is not None
        ]
        if not occupied:
            return None
        return min(occupied), max(occupied)

    def iter_days(self) -> Iterator[list[tuple[int, ShiftKind, str]]]:
        """Yield, for each weekday, ``(slot_index, kind, course)`` of occupied slots."""
        for day in self._days:
            yield [
                (index, slot.kind, slot.course)
                for index, slot in enumerate(day)
                if slot is not None
            ]

    def blocks(self) -> list[OccupiedBlock]:
        """Merge consecutive slots of the same placement into blocks, Monday first."""
        blocks: list[OccupiedBlock] = []
        for weekday in ALL_DAYS:
            run_start: int | None = None
            current: Placement | None = None
            for index, slot in enumerate(self._days[weekday] + (None,)):
                if slot == current:
                    continue
                if current is not None and run_start is not None:
                    blocks.append(
                        OccupiedBlock(
                            weekday=weekday,
                            start=index_to_time(run_start),
                            end=index_to_time(index),
                            kind=current.kind,
                            course=current.course,
                        )
                    )
                current = slot
                run_start = index
        return blocks

    def __repr__(self) -> str:
        return (
            f"TimeTable(placements={self.placement_count()}, "
            f"work_span={self.total_work_span()})"
        )


__all__ = ["COLORS", "Placement", "OccupiedBlock", "TimeTable"]
