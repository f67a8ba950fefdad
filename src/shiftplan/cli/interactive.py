"""Menu-driven refinement of a filter set over pre-generated timetables."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from enum import Enum

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, Prompt

from shiftplan.cli.render import render_timetable
from shiftplan.core.errors import ShiftPlanError, ShiftPlanValueError
from shiftplan.core.types import Weekday, parse_time_of_day
from shiftplan.export import write_calendar
from shiftplan.filters import (
    ShiftRequirement,
    TimetableFilters,
    apply_filters,
    load_filters,
    save_filters,
)
from shiftplan.scheduling.timetable import TimeTable


class MenuAction(str, Enum):
    STARTS_AFTER = "Starts after"
    ENDS_BEFORE = "Ends before"
    HAS_FREE_DAY = "Has free day"
    HAS_A_SHIFT = "Has a shift"
    HASNT_A_SHIFT = "Hasn't a shift"
    SAVE_FILTERS = "Save filters"
    LOAD_FILTERS = "Load filters"
    EXPORT_TO_ICAL = "Export as iCal"
    CLOSE = "Close"


MENU: tuple[MenuAction, ...] = tuple(MenuAction)


class Explorer:
    """Render matching timetables, ask for one menu action, repeat until Close.

    Timetables are always filtered from the full list, so clearing a filter
    brings back timetables it had hidden.
    """

    def __init__(
        self,
        timetables: Sequence[TimeTable],
        filters: TimetableFilters | None = None,
        *,
        console: Console | None = None,
        show: int = 3,
    ) -> None:
        self.timetables = list(timetables)
        self.filters = filters or TimetableFilters()
        self.console = console or Console()
        self.show = show

    def matching(self) -> list[TimeTable]:
        return apply_filters(self.timetables, self.filters)

    def run(self) -> TimetableFilters:
        feedback = ""
        while True:
            matching = self.matching()
            for rank, timetable in enumerate(matching[: self.show], start=1):
                self.console.print(render_timetable(timetable, title=f"#{rank}"))
            self.console.print(f"Number of possible timetables: {len(matching)}")
            if feedback:
                self.console.print(escape(feedback))
            menu = "\n".join(f"{i}) {action.value}" for i, action in enumerate(MENU))
            choice = IntPrompt.ask(f"Filters:\n{menu}\nPick one", console=self.console)
            if not 0 <= choice < len(MENU):
                feedback = "Invalid choice"
                continue
            action = MENU[choice]
            if action is MenuAction.CLOSE:
                return self.filters
            feedback = self.handle(action, matching)

    def _ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self.console, default="", show_default=False).strip()

    def handle(self, action: MenuAction, matching: Sequence[TimeTable]) -> str:
        """Apply one menu action and return the feedback line."""
        if action in (MenuAction.STARTS_AFTER, MenuAction.ENDS_BEFORE):
            answer = self._ask("Time")
            bound = None
            if answer:
                try:
                    bound = parse_time_of_day(answer)
                except ShiftPlanValueError as exc:
                    return str(exc)
            if action is MenuAction.STARTS_AFTER:
                self.filters = self.filters.with_starts_after(bound)
            else:
                self.filters = self.filters.with_ends_before(bound)
            return "" if bound is not None else "Cleared"

        if action is MenuAction.HAS_FREE_DAY:
            current = ",".join(day.abbrev for day in sorted(self.filters.free_days))
            self.console.print(f"Currently free: {current or 'none'}")
            answer = self._ask("Free days (e.g. Mon,Fri; empty clears)")
            try:
                days = {Weekday.parse(part) for part in answer.split(",") if part.strip()}
            except ShiftPlanValueError as exc:
                return str(exc)
            self.filters = self.filters.with_free_days(days)
            return "" if days else "Cleared"

        if action in (MenuAction.HAS_A_SHIFT, MenuAction.HASNT_A_SHIFT):
            required = action is MenuAction.HAS_A_SHIFT
            shift = self._ask("Shift, T<number> or L<number> (empty clears)")
            if not shift:
                self.filters = (
                    self.filters.clear_required_shifts()
                    if required
                    else self.filters.clear_forbidden_shifts()
                )
                return "Cleared"
            course = self._ask("Course")
            try:
                requirement = ShiftRequirement(shift=shift, course=course)
            except ValidationError:
                return f"Invalid shift '{shift}' for course '{course}'"
            self.filters = (
                self.filters.require_shift(requirement)
                if required
                else self.filters.forbid_shift(requirement)
            )
            return ""

        if action is MenuAction.SAVE_FILTERS:
            try:
                save_filters(self._ask("Filename"), self.filters)
            except OSError as exc:
                return f"Error saving filters: {exc}"
            return "Saved!"

        if action is MenuAction.LOAD_FILTERS:
            try:
                self.filters = load_filters(self._ask("Filename"))
            except (OSError, ShiftPlanError) as exc:
                return f"Error loading filters: {exc}"
            return "Loaded!"

        if action is MenuAction.EXPORT_TO_ICAL:
            if len(matching) != 1:
                return "Error exporting to iCal: Either too many timetables or too few"
            filename = self._ask("Filename")
            try:
                start = _parse_date(self._ask("Start date: YYYY-MM-DD"))
                end = _parse_date(self._ask("End date: YYYY-MM-DD"))
                write_calendar(filename, matching[0], start, end)
            except (OSError, ShiftPlanError) as exc:
                return f"Error exporting to iCal: {exc}"
            return "Saved!"

        raise ValueError(f"Unhandled menu action {action!r}")


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ShiftPlanValueError(f"Invalid date '{text}'") from exc


__all__ = ["Explorer", "MENU", "MenuAction"]
