"""Commands that rehydrate saved workouts: list and map."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mapty.commands.common import build_session, get_state, print_json_payload, start_session
from mapty.core.config import resolve_map_output, update_config
from mapty.utils.formatting import format_coords, summary_payload
from mapty.utils.parsing import parse_coords, validate_coords


def list_command(ctx: typer.Context) -> None:
    """Show every saved workout in creation order."""
    state = get_state(ctx)
    session = build_session(state)
    count = session.controller.on_startup()
    workouts = session.list_surface.rows

    if state.json_output:
        payload = {"total": count, "workouts": [summary_payload(workout) for workout in workouts]}
        if session.notifier.messages:
            payload["errors"] = list(session.notifier.messages)
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"total\t{count}")
        session.list_surface.print_rows()
        return

    if not workouts:
        state.console.print("No workouts logged yet")
        return
    session.list_surface.print_rows(title=f"{count} workout(s)")


def map_command(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", help="Where to write the map HTML"),
    at: Optional[str] = typer.Option(None, "--at", help="Center the map on LAT,LNG", callback=validate_coords),
) -> None:
    """Write an HTML map with a marker for every saved workout."""
    state = get_state(ctx)
    session = start_session(state, location=parse_coords(at) if at else None)
    path = session.map_surface.write(resolve_map_output(state.config, explicit=output))

    payload = {"status": "written", "path": str(path), "markers": len(session.map_surface.markers)}
    if state.json_output:
        if session.notifier.messages:
            payload["errors"] = list(session.notifier.messages)
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\twritten")
        typer.echo(f"path\t{path}")
        typer.echo(f"markers\t{payload['markers']}")
        return

    state.console.print(f"Map with {payload['markers']} marker(s) written to: {path}")


def home_command(
    ctx: typer.Context,
    coords: str = typer.Argument(..., help="Home position LAT,LNG", callback=validate_coords),
) -> None:
    """Save the position the map opens on."""
    state = get_state(ctx)
    lat, lng = parse_coords(coords)
    path = update_config({"map": {"home": [lat, lng]}}, state.config_path)

    if state.json_output:
        print_json_payload(state, {"status": "saved", "home": [lat, lng], "config": str(path)})
        return

    if state.plain_output:
        typer.echo("status\tsaved")
        typer.echo(f"home\t{format_coords((lat, lng))}")
        return

    state.console.print(f"Home set to {format_coords((lat, lng))} in {path}")
