"""Tabular summaries of generated timetables."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from shiftplan.core.types import ALL_DAYS
from shiftplan.scheduling.timetable import TimeTable

__all__ = [
    "SUMMARY_COLUMNS",
    "BLOCK_COLUMNS",
    "timetable_summary_frame",
    "blocks_frame",
]

SUMMARY_COLUMNS = [
    "rank",
    "work_span",
    "busy_days",
    "free_days",
    "earliest_start",
    "latest_end",
    "shifts",
]

BLOCK_COLUMNS = ["weekday", "start", "end", "course", "kind"]


def _summary_row(rank: int, timetable: TimeTable) -> dict[str, object]:
    blocks = timetable.blocks()
    earliest = min((b.start for b in blocks), default=None)
    latest = max((b.end for b in blocks), default=None)
    free = [day.abbrev for day in ALL_DAYS if timetable.free_day(day)]
    return {
        "rank": rank,
        "work_span": timetable.total_work_span(),
        "busy_days": len(ALL_DAYS) - len(free),
        "free_days": " ".join(free),
        "earliest_start": f"{earliest:%H:%M}" if earliest is not None else "",
        "latest_end": f"{latest:%H:%M}" if latest is not None else "",
        "shifts": "; ".join(f"{course} {kind}" for course, kind in timetable.placed_shifts()),
    }


def timetable_summary_frame(timetables: Sequence[TimeTable]) -> pd.DataFrame:
    """One row per timetable; ``rank`` is 1-based in the given order.

    Parameters
    ----------
    timetables:
        Timetables, usually already filtered and ranked.
    """
    if not timetables:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    rows = [_summary_row(rank, timetable) for rank, timetable in enumerate(timetables, start=1)]
    return pd.DataFrame(rows).reindex(columns=SUMMARY_COLUMNS)


def blocks_frame(timetable: TimeTable) -> pd.DataFrame:
    """Occupied blocks of a single timetable, Monday first."""
    rows = [
        {
            "weekday": block.weekday.abbrev,
            "start": block.start.strftime("%H:%M"),
            "end": block.end.strftime("%H:%M"),
            "course": block.course,
            "kind": str(block.kind),
        }
        for block in timetable.blocks()
    ]
    if not rows:
        return pd.DataFrame(columns=BLOCK_COLUMNS)
    return pd.DataFrame(rows).reindex(columns=BLOCK_COLUMNS)
