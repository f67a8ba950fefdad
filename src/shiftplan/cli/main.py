from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from itertools import islice
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shiftplan.cli._utils import build_filters, parse_date_option, parse_timezone_option
from shiftplan.cli.interactive import Explorer
from shiftplan.cli.render import render_timetable
from shiftplan.config import ShiftPlanSettings, load_settings, merge_settings
from shiftplan.core.errors import ShiftPlanError, ShiftPlanValueError
from shiftplan.evaluation import blocks_frame, timetable_summary_frame
from shiftplan.export import write_calendar
from shiftplan.filters import (
    TimetableFilters,
    apply_filters,
    load_filters,
    rank_timetables,
    save_filters,
)
from shiftplan.scenario.io import load_schedule
from shiftplan.scheduling import SearchStats, ShiftIndex, TimeTable, iter_timetables
from shiftplan.telemetry import RunTelemetryLogger

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

_CONFIG_OPTION = typer.Option(
    None, "--config", help="Settings file (YAML, TOML or JSON).", dir_okay=False
)
_FILTERS_OPTION = typer.Option(
    None, "--filters", help="Load a saved filter set (JSON or YAML) before applying options."
)
_STARTS_AFTER_OPTION = typer.Option(
    None,
    "--starts-after",
    help="Keep timetables with no class before this time (e.g. 9, 9h30, 09:30).",
)
_ENDS_BEFORE_OPTION = typer.Option(
    None, "--ends-before", help="Keep timetables with no class at or after this time."
)
_FREE_DAY_OPTION = typer.Option(
    None, "--free-day", "-f", help="Require a class-free weekday (repeatable, e.g. --free-day Fri)."
)
_HAS_SHIFT_OPTION = typer.Option(
    None, "--has-shift", help="Require a shift as KIND:COURSE (e.g. T1:CPD). Repeatable."
)
_HASNT_SHIFT_OPTION = typer.Option(
    None, "--hasnt-shift", help="Exclude a shift as KIND:COURSE (e.g. L2:CPD). Repeatable."
)
_LIMIT_OPTION = typer.Option(
    None, "--limit", min=1, help="Stop the search after this many timetables."
)
_WEEKEND_OPTION = typer.Option(
    False, "--allow-weekend", help="Accept Sat/Sun sessions in the schedule."
)
_TELEMETRY_OPTION = typer.Option(
    None,
    "--telemetry-log",
    help="Append a run record to a JSONL file (e.g. telemetry/runs.jsonl).",
    writable=True,
    dir_okay=False,
)


@contextmanager
def _user_errors() -> Iterator[None]:
    """Report shiftplan errors and missing files without a traceback."""
    try:
        yield
    except ShiftPlanError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {escape(str(exc.filename or exc))}")
        raise typer.Exit(1) from exc


def _resolve_settings(config: Path | None, **overrides: Any) -> ShiftPlanSettings:
    return merge_settings(load_settings(config), **overrides)


def _telemetry(settings: ShiftPlanSettings, command: str, schedule: Path, config: dict[str, Any]):
    if settings.telemetry_log is None:
        return nullcontext(None)
    return RunTelemetryLogger(
        log_path=settings.telemetry_log,
        command=command,
        schedule_path=str(schedule),
        config=config,
    )


def _search(
    schedule: Path, settings: ShiftPlanSettings, filters: TimetableFilters
) -> tuple[ShiftIndex, list[TimeTable], list[TimeTable], SearchStats, int]:
    """Parse, enumerate, filter and rank; returns (index, all, ranked matches, stats, sessions)."""
    sessions = load_schedule(schedule, allow_weekend=settings.allow_weekend)
    index = ShiftIndex.build(sessions)
    stats = SearchStats()
    produced = iter_timetables(index, stats=stats)
    if settings.limit is not None:
        produced = islice(produced, settings.limit)
    timetables = list(produced)
    matching = rank_timetables(apply_filters(timetables, filters))
    return index, timetables, matching, stats, len(sessions)


def _initial_filters(settings: ShiftPlanSettings, filters_file: Path | None) -> TimetableFilters:
    path = filters_file or settings.filters_path
    return load_filters(path) if path is not None else TimetableFilters()


@app.command()
def validate(
    schedule: Path,
    allow_weekend: bool = _WEEKEND_OPTION,
    config: Path | None = _CONFIG_OPTION,
):
    """Parse a schedule file and summarise the shifts offered per course."""
    with _user_errors():
        settings = _resolve_settings(config, allow_weekend=allow_weekend or None)
        sessions = load_schedule(schedule, allow_weekend=settings.allow_weekend)
        index = ShiftIndex.build(sessions)
        t = Table(title=f"Schedule: {schedule.name}")
        t.add_column("Course")
        t.add_column("Lecture shifts")
        t.add_column("Lab shifts")
        for course in index.courses:
            kinds = sorted(index.kinds_for(course), key=lambda kind: kind.number)
            lectures = [str(kind) for kind in kinds if not kind.is_lab]
            labs = [str(kind) for kind in kinds if kind.is_lab]
            t.add_row(course, " ".join(lectures) or "-", " ".join(labs) or "-")
        console.print(t)
        console.print(
            f"Sessions: {len(sessions)}. Upper bound on timetables: {index.alternative_count()}"
        )


@app.command()
def generate(
    schedule: Path,
    filters_file: Path | None = _FILTERS_OPTION,
    starts_after: str | None = _STARTS_AFTER_OPTION,
    ends_before: str | None = _ENDS_BEFORE_OPTION,
    free_day: list[str] | None = _FREE_DAY_OPTION,
    has_shift: list[str] | None = _HAS_SHIFT_OPTION,
    hasnt_shift: list[str] | None = _HASNT_SHIFT_OPTION,
    save_filters_to: Path | None = typer.Option(
        None, "--save-filters", help="Write the effective filter set to this file.", dir_okay=False
    ),
    limit: int | None = _LIMIT_OPTION,
    show: int | None = typer.Option(
        None, "--show", min=0, help="Number of ranked timetables to render (0 prints counts only)."
    ),
    summary_csv: Path | None = typer.Option(
        None, "--summary-csv", help="Write a per-timetable summary CSV.", dir_okay=False
    ),
    blocks_csv: Path | None = typer.Option(
        None, "--blocks-csv", help="Write the classes of the top-ranked timetable.", dir_okay=False
    ),
    allow_weekend: bool = _WEEKEND_OPTION,
    config: Path | None = _CONFIG_OPTION,
    telemetry_log: Path | None = _TELEMETRY_OPTION,
):
    """Enumerate every clash-free timetable, filter, rank by work span and display."""
    with _user_errors():
        settings = _resolve_settings(
            config,
            allow_weekend=allow_weekend or None,
            limit=limit,
            show=show,
            telemetry_log=telemetry_log,
        )
        filters = build_filters(
            _initial_filters(settings, filters_file),
            starts_after=starts_after,
            ends_before=ends_before,
            free_days=free_day,
            has_shift=has_shift,
            hasnt_shift=hasnt_shift,
        )
        run_config = {"settings": settings.as_dict(), "filters": filters.model_dump(mode="json")}
        with _telemetry(settings, "generate", schedule, run_config) as telemetry:
            index, timetables, matching, stats, session_count = _search(schedule, settings, filters)
            if telemetry is not None:
                telemetry.record(
                    sessions=session_count,
                    shift_groups=len(index),
                    timetables=len(timetables),
                    matching=len(matching),
                    pruned=stats.pruned,
                )

        for rank, timetable in enumerate(matching[: settings.show], start=1):
            console.print(
                render_timetable(
                    timetable, title=f"#{rank} (work span {timetable.total_work_span()})"
                )
            )
        for line in filters.describe():
            console.print(f"[dim]filter: {escape(line)}[/dim]")
        if settings.limit is not None and len(timetables) >= settings.limit:
            console.print(f"[yellow]Search stopped after {settings.limit} timetables.[/yellow]")
        console.print(f"Number of possible timetables: {len(matching)}")

        if summary_csv is not None:
            summary_csv.parent.mkdir(parents=True, exist_ok=True)
            timetable_summary_frame(matching).to_csv(summary_csv, index=False)
            console.print(f"Summary saved to {summary_csv}")
        if blocks_csv is not None:
            if not matching:
                console.print("[yellow]No timetable matches; blocks CSV not written.[/yellow]")
            else:
                blocks_csv.parent.mkdir(parents=True, exist_ok=True)
                blocks_frame(matching[0]).to_csv(blocks_csv, index=False)
                console.print(f"Blocks of #1 saved to {blocks_csv}")
        if save_filters_to is not None:
            save_filters(save_filters_to, filters)
            console.print(f"Filters saved to {save_filters_to}")


def _choose_for_export(matching: list[TimeTable], pick: int | None) -> TimeTable:
    if pick is not None:
        if pick > len(matching):
            raise ShiftPlanValueError(
                f"Only {len(matching)} timetable(s) match; cannot pick #{pick}."
            )
        return matching[pick - 1]
    if len(matching) != 1:
        raise ShiftPlanValueError(
            f"Either too many timetables or too few ({len(matching)} match)."
        )
    return matching[0]


@app.command()
def export(
    schedule: Path,
    output: Path = typer.Argument(..., dir_okay=False, help="Destination .ics file."),
    start: str = typer.Option(..., "--start", help="First day of the term (YYYY-MM-DD)."),
    end: str = typer.Option(..., "--end", help="Last day of the term (YYYY-MM-DD)."),
    pick: int | None = typer.Option(
        None,
        "--pick",
        min=1,
        help="Export the N-th ranked timetable instead of requiring one match.",
    ),
    tz: str | None = typer.Option(
        None, "--tz", help="Time zone of the class times (e.g. Europe/Lisbon); default local."
    ),
    filters_file: Path | None = _FILTERS_OPTION,
    starts_after: str | None = _STARTS_AFTER_OPTION,
    ends_before: str | None = _ENDS_BEFORE_OPTION,
    free_day: list[str] | None = _FREE_DAY_OPTION,
    has_shift: list[str] | None = _HAS_SHIFT_OPTION,
    hasnt_shift: list[str] | None = _HASNT_SHIFT_OPTION,
    limit: int | None = _LIMIT_OPTION,
    allow_weekend: bool = _WEEKEND_OPTION,
    config: Path | None = _CONFIG_OPTION,
    telemetry_log: Path | None = _TELEMETRY_OPTION,
):
    """Export one timetable as weekly iCal events between --start and --end."""
    start_date = parse_date_option(start)
    end_date = parse_date_option(end)
    zone = parse_timezone_option(tz)
    with _user_errors():
        settings = _resolve_settings(
            config, allow_weekend=allow_weekend or None, limit=limit, telemetry_log=telemetry_log
        )
        filters = build_filters(
            _initial_filters(settings, filters_file),
            starts_after=starts_after,
            ends_before=ends_before,
            free_days=free_day,
            has_shift=has_shift,
            hasnt_shift=hasnt_shift,
        )
        run_config = {"settings": settings.as_dict(), "filters": filters.model_dump(mode="json")}
        with _telemetry(settings, "export", schedule, run_config) as telemetry:
            _, timetables, matching, stats, session_count = _search(schedule, settings, filters)
            if telemetry is not None:
                telemetry.record(
                    sessions=session_count,
                    timetables=len(timetables),
                    matching=len(matching),
                    pruned=stats.pruned,
                )
            chosen = _choose_for_export(matching, pick)
            events = write_calendar(output, chosen, start_date, end_date, tz=zone)
            if telemetry is not None:
                telemetry.record(events=events)
        console.print(f"Exported {events} event(s) to {output}")


@app.command()
def explore(
    schedule: Path,
    filters_file: Path | None = _FILTERS_OPTION,
    limit: int | None = _LIMIT_OPTION,
    show: int | None = typer.Option(None, "--show", min=0, help="Timetables rendered per round."),
    allow_weekend: bool = _WEEKEND_OPTION,
    config: Path | None = _CONFIG_OPTION,
):
    """Refine filters interactively, then save them or export the final timetable."""
    with _user_errors():
        settings = _resolve_settings(
            config, allow_weekend=allow_weekend or None, limit=limit, show=show
        )
        filters = _initial_filters(settings, filters_file)
        _, timetables, _, _, _ = _search(schedule, settings, TimetableFilters())
        explorer = Explorer(
            rank_timetables(timetables), filters, console=console, show=settings.show
        )
        explorer.run()


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
