"""Workout logging command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from mapty.commands.common import AppSession, get_state, print_json_payload, start_session
from mapty.core.config import resolve_map_output
from mapty.core.constants import VALIDATION_MESSAGE
from mapty.core.models import Coordinates, Workout
from mapty.core.state import CLIState
from mapty.surfaces.console import FORM_FIELDS, workouts_table
from mapty.utils.formatting import summary_payload, summary_text
from mapty.utils.parsing import load_entries, parse_coords, split_entry, validate_coords


def _select_type(session: AppSession, workout_type: str) -> None:
    """Set the type field and show the matching variant field."""
    session.list_surface.set_field("type", workout_type)
    wanted = "elevation" if workout_type.lower() == "cycling" else "cadence"
    if session.list_surface.alternate_field != wanted:
        session.controller.on_type_change()


def _prompt_missing(session: AppSession, values: Dict[str, Optional[str]]) -> None:
    for name in ("distance", "duration", session.list_surface.alternate_field):
        if values.get(name) is None:
            values[name] = typer.prompt(name.capitalize())
        session.list_surface.set_field(name, values[name])


def _submit_single(
    session: AppSession,
    coords: Coordinates,
    values: Dict[str, Optional[str]],
    interactive: bool,
) -> Optional[Workout]:
    session.map_surface.click(coords)
    _select_type(session, str(values.get("type") or "running"))

    while True:
        if interactive:
            _prompt_missing(session, values)
        else:
            for name in ("distance", "duration", "cadence", "elevation"):
                if values.get(name) is not None:
                    session.list_surface.set_field(name, values[name])

        workout = session.list_surface.submit()
        if workout is not None or not interactive:
            return workout
        # Rejected input: the form is still open, ask again.
        values = {"type": typer.prompt("Type", default=str(values.get("type") or "running"))}
        _select_type(session, str(values["type"]))


def _submit_entries(session: AppSession, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results: List[Dict[str, Any]] = []
    for index, entry in enumerate(entries, 1):
        try:
            coords, fields = split_entry(entry)
        except ValueError as exc:
            results.append({"status": "skipped", "entry": index, "reason": str(exc)})
            continue

        session.map_surface.click(coords)
        _select_type(session, str(fields.get("type") or "running"))
        form_values = {key: value for key, value in fields.items() if key in FORM_FIELDS}
        workout = session.list_surface.submit(**form_values)
        if workout is None:
            session.controller.cancel()
            results.append({"status": "rejected", "entry": index, "reason": VALIDATION_MESSAGE})
            continue
        results.append({"status": "created", "entry": index, "workout": summary_payload(workout)})
    return results


def _report_single(state: CLIState, workout: Optional[Workout], map_path: Path) -> None:
    if workout is None:
        if state.json_output:
            print_json_payload(state, {"status": "error", "message": VALIDATION_MESSAGE})
        raise typer.Exit(code=1)

    if state.json_output:
        print_json_payload(
            state,
            {"status": "created", "workout": summary_payload(workout), "map": str(map_path)},
        )
        return

    if state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"id\t{workout.id}")
        typer.echo(f"summary\t{summary_text(workout)}")
        typer.echo(f"map\t{map_path}")
        return

    state.console.print(workouts_table([workout], title="Workout logged"))
    state.console.print(f"Map written to: {map_path}")


def log_command(
    ctx: typer.Context,
    coords: Optional[str] = typer.Argument(None, help="Map position LAT,LNG", callback=validate_coords),
    workout_type: Optional[str] = typer.Option(None, "--type", help="Workout type: running|cycling"),
    distance: Optional[str] = typer.Option(None, help="Distance in km"),
    duration: Optional[str] = typer.Option(None, help="Duration in minutes"),
    cadence: Optional[str] = typer.Option(None, help="Cadence in steps/min (running)"),
    elevation: Optional[str] = typer.Option(None, help="Elevation gain in m (cycling)"),
    file: Optional[Path] = typer.Option(None, help="JSON/YAML file with workout entries"),
    stdin: bool = typer.Option(False, "--stdin", help="Read workout entries from stdin"),
    at: Optional[str] = typer.Option(None, "--at", help="Center the map on LAT,LNG", callback=validate_coords),
    map_output: Optional[Path] = typer.Option(None, "--map-output", help="Where to write the map HTML"),
) -> None:
    """Log a workout at a map position, prompting for missing fields."""
    state = get_state(ctx)
    session = start_session(state, location=parse_coords(at) if at else None)
    map_path = resolve_map_output(state.config, explicit=map_output)

    if file or stdin:
        stdin_text = sys.stdin.read() if stdin else ""
        entries = load_entries(file_path=file, read_stdin=stdin, stdin_text=stdin_text)
        if not entries:
            raise typer.BadParameter("No workout entries found in input")
        results = _submit_entries(session, entries)
        session.map_surface.write(map_path)

        if state.json_output:
            print_json_payload(state, {"results": results, "map": str(map_path)})
        elif state.plain_output:
            typer.echo(f"processed\t{len(results)}")
            for item in results:
                typer.echo(f"{item['entry']}\t{item['status']}")
        else:
            created = sum(1 for item in results if item["status"] == "created")
            state.console.print(f"Logged {created} of {len(results)} workout(s)")
            state.console.print(f"Map written to: {map_path}")

        if any(item["status"] != "created" for item in results):
            raise typer.Exit(code=1)
        return

    values: Dict[str, Optional[str]] = {
        "type": workout_type,
        "distance": distance,
        "duration": duration,
        "cadence": cadence,
        "elevation": elevation,
    }
    kind = (workout_type or "").lower()
    variant_field = "elevation" if kind == "cycling" else "cadence"
    interactive = workout_type is None or any(
        values[name] is None for name in ("distance", "duration", variant_field)
    )
    if (interactive or coords is None) and state.json_output:
        raise typer.BadParameter("--json requires coordinates, --type, --distance, --duration and the variant field")

    if coords is None:
        coords = typer.prompt("Map position (LAT,LNG)", value_proc=validate_coords)
    if workout_type is None:
        values["type"] = typer.prompt("Type", default="running")

    workout = _submit_single(session, parse_coords(coords), values, interactive=interactive)
    if workout is not None:
        session.map_surface.write(map_path)
    _report_single(state, workout, map_path)
