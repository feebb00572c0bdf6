"""Terminal implementations of the form/list surface, notifier and scheduler."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from mapty.core.models import Workout
from mapty.core.surfaces import SubmitHandler
from mapty.utils.formatting import summary_fields, summary_text

FORM_FIELDS = ("type", "distance", "duration", "cadence", "elevation")


def workouts_table(workouts: Iterable[Workout], title: Optional[str] = None) -> Table:
    """Rich table with one row per workout."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Workout")
    table.add_column("Distance", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Pace/Speed", justify="right")
    table.add_column("Cadence/Elevation", justify="right")

    for workout in workouts:
        cells = [f"{icon} {value} {unit}" for icon, value, unit in summary_fields(workout)]
        table.add_row(workout.id, workout.description, *cells)
    return table


class ConsoleListSurface:
    """Form state plus the rendered workout list, kept in memory."""

    def __init__(self, console: Console, plain: bool = False) -> None:
        self.console = console
        self.plain = plain
        self.visible = False
        self.collapsed = False
        self.focused: Optional[str] = None
        self.alternate_field = "cadence"
        self.fields: Dict[str, Any] = {"type": "running"}
        self.rows: List[Workout] = []
        self._submit_handler: Optional[SubmitHandler] = None

    def on_submit(self, handler: SubmitHandler) -> None:
        self._submit_handler = handler

    def submit(self, **fields: Any) -> Any:
        """Fill the given fields and fire the registered submit handler."""
        if self._submit_handler is None:
            raise RuntimeError("No submit handler registered")
        for name, value in fields.items():
            self.set_field(name, value)
        return self._submit_handler(dict(self.fields))

    def set_field(self, name: str, value: Any) -> None:
        if name not in FORM_FIELDS:
            raise KeyError(f"Unknown form field: {name}")
        self.fields[name] = value

    def reveal(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False
        self.collapsed = True

    def restore_layout(self) -> None:
        self.collapsed = False

    def clear_fields(self) -> None:
        self.fields = {"type": self.fields.get("type", "running")}

    def focus_first_field(self) -> None:
        self.focused = "distance"

    def toggle_alternate_field_visibility(self) -> None:
        self.alternate_field = "elevation" if self.alternate_field == "cadence" else "cadence"

    def render_summary_row(self, workout: Workout) -> None:
        self.rows.append(workout)

    def print_rows(self, title: Optional[str] = None) -> None:
        if self.plain:
            for workout in self.rows:
                typer.echo(f"{workout.id}\t{workout.kind.value}\t{summary_text(workout)}")
            return
        self.console.print(workouts_table(self.rows, title=title))


class ConsoleNotifier:
    """Alerts printed to the terminal; messages are kept for inspection."""

    def __init__(self, console: Console, plain: bool = False, silent: bool = False) -> None:
        self.console = console
        self.plain = plain
        self.silent = silent
        self.messages: List[str] = []

    def alert(self, message: str) -> None:
        self.messages.append(message)
        if self.silent:
            return
        if self.plain:
            typer.echo(f"error\t{message}", err=True)
            return
        self.console.print(message, style="bold red", markup=False)


class ImmediateScheduler:
    """Runs deferred callbacks straight away; a terminal has no layout to animate."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], Any]) -> None:
        self.delays.append(delay_seconds)
        callback()
