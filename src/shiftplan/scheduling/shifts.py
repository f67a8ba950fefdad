"""Group raw sessions into the shift alternatives offered by each course."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from shiftplan.core.types import Session, ShiftKind

CourseKey = tuple[str, bool]  # (course name, is_lab)


@dataclass(frozen=True, slots=True)
class ClassGroup:
    """Every weekly session of one shift offering, e.g. all meetings of ``CPD T1``."""

    course: str
    kind: ShiftKind
    sessions: tuple[Session, ...]

    @property
    def is_lab(self) -> bool:
        return self.kind.is_lab

    def __iter__(self) -> Iterator[Session]:
        return iter(self.sessions)

    def __len__(self) -> int:
        return len(self.sessions)


class ShiftIndex(Mapping[CourseKey, Mapping[ShiftKind, ClassGroup]]):
    """Read-only mapping ``(course, is_lab) -> {kind: ClassGroup}``.

    Keys keep the order in which each course component first appears in the
    input, which fixes the search order of the combination generator.
    """

    __slots__ = ("_groups",)

    def __init__(self, groups: Mapping[CourseKey, Mapping[ShiftKind, ClassGroup]]) -> None:
        self._groups = MappingProxyType(
            {key: MappingProxyType(dict(alternatives)) for key, alternatives in groups.items()}
        )

    @classmethod
    def build(cls, sessions: Iterable[Session]) -> "ShiftIndex":
        buckets: dict[CourseKey, dict[ShiftKind, list[Session]]] = {}
        for session in sessions:
            key = (session.course, session.kind.is_lab)
            buckets.setdefault(key, {}).setdefault(session.kind, []).append(session)
        groups = {
            key: {
                kind: ClassGroup(course=key[0], kind=kind, sessions=tuple(members))
                for kind, members in alternatives.items()
            }
            for key, alternatives in buckets.items()
        }
        return cls(groups)

    def __getitem__(self, key: CourseKey) -> Mapping[ShiftKind, ClassGroup]:
        return self._groups[key]

    def __iter__(self) -> Iterator[CourseKey]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    @property
    def courses(self) -> list[str]:
        return sorted({course for course, _ in self._groups})

    def kinds_for(self, course: str) -> set[ShiftKind]:
        kinds: set[ShiftKind] = set()
        for is_lab in (False, True):
            kinds.update(self._groups.get((course, is_lab), {}))
        return kinds

    def session_count(self) -> int:
        return sum(
            len(group) for alternatives in self._groups.values() for group in alternatives.values()
        )

    def alternative_count(self) -> int:
        """Upper bound on the number of timetables (product of alternatives per key)."""
        return math.prod(len(alternatives) for alternatives in self._groups.values())


__all__ = ["ClassGroup", "CourseKey", "ShiftIndex"]
