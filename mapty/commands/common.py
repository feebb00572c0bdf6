"""Shared command helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import typer

from mapty.core.config import resolve_relayout_delay, resolve_storage_path
from mapty.core.constants import DEFAULT_ZOOM, STORAGE_KEY
from mapty.core.controller import AppController
from mapty.core.geolocation import geolocator_from_config
from mapty.core.models import Coordinates
from mapty.core.state import CLIState
from mapty.core.storage import WorkoutStore
from mapty.surfaces.console import ConsoleListSurface, ConsoleNotifier, ImmediateScheduler
from mapty.surfaces.leaflet import LeafletMapSurface


@dataclass
class AppSession:
    """A wired controller together with the surfaces it drives."""

    controller: AppController
    map_surface: LeafletMapSurface
    list_surface: ConsoleListSurface
    notifier: ConsoleNotifier
    store: WorkoutStore


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
        return
    state.console.print_json(data=payload)


def build_session(state: CLIState, location: Optional[Coordinates] = None) -> AppSession:
    """Wire the controller to terminal/HTML surfaces and the configured store."""
    map_surface = LeafletMapSurface()
    list_surface = ConsoleListSurface(state.console, plain=state.plain_output)
    notifier = ConsoleNotifier(state.console, plain=state.plain_output, silent=state.json_output)
    store = WorkoutStore(
        resolve_storage_path(state.config),
        key=str(state.config.get("storage", {}).get("key") or STORAGE_KEY),
    )
    controller = AppController(
        map_surface=map_surface,
        list_surface=list_surface,
        store=store,
        notifier=notifier,
        scheduler=ImmediateScheduler(),
        geolocator=geolocator_from_config(state.config, override=location),
        zoom=int(state.config.get("map", {}).get("zoom", DEFAULT_ZOOM)),
        relayout_delay=resolve_relayout_delay(state.config),
    )
    return AppSession(
        controller=controller,
        map_surface=map_surface,
        list_surface=list_surface,
        notifier=notifier,
        store=store,
    )


def start_session(state: CLIState, location: Optional[Coordinates] = None) -> AppSession:
    """Build and start a session, exiting with code 1 when the map cannot load."""
    session = build_session(state, location=location)
    if not session.controller.start():
        if state.json_output:
            print_json_payload(state, {"status": "error", "message": session.notifier.messages[-1]})
        raise typer.Exit(code=1)
    return session
