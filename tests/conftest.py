from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from typer.testing import CliRunner

from mapty.core.controller import AppController
from mapty.core.geolocation import GeolocationError, StaticGeolocator
from mapty.core.models import Coordinates, Workout
from mapty.core.storage import WorkoutStore

FIXED_NOW = datetime(2026, 4, 14, 7, 30, tzinfo=timezone.utc)


class RecordingMap:
    def __init__(self) -> None:
        self.markers: List[Tuple[Coordinates, str, str]] = []
        self.centered: List[Tuple[Coordinates, int]] = []
        self.click_handler: Optional[Callable[[Coordinates], Any]] = None

    def on_click(self, handler: Callable[[Coordinates], Any]) -> None:
        self.click_handler = handler

    def place_marker(self, coords: Coordinates, popup_text: str, style_class: str) -> None:
        self.markers.append((coords, popup_text, style_class))

    def center_on(self, coords: Coordinates, zoom: int) -> None:
        self.centered.append((coords, zoom))


class RecordingList:
    def __init__(self) -> None:
        self.calls: List[str] = []
        self.rows: List[Workout] = []
        self.submit_handler: Optional[Callable[[Dict[str, Any]], Any]] = None

    def on_submit(self, handler: Callable[[Dict[str, Any]], Any]) -> None:
        self.submit_handler = handler

    def reveal(self) -> None:
        self.calls.append("reveal")

    def hide(self) -> None:
        self.calls.append("hide")

    def restore_layout(self) -> None:
        self.calls.append("restore_layout")

    def clear_fields(self) -> None:
        self.calls.append("clear_fields")

    def focus_first_field(self) -> None:
        self.calls.append("focus_first_field")

    def toggle_alternate_field_visibility(self) -> None:
        self.calls.append("toggle")

    def render_summary_row(self, workout: Workout) -> None:
        self.calls.append("render_summary_row")
        self.rows.append(workout)


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: List[str] = []

    def alert(self, message: str) -> None:
        self.messages.append(message)


class RecordingScheduler:
    def __init__(self) -> None:
        self.pending: List[Tuple[float, Callable[[], Any]]] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], Any]) -> None:
        self.pending.append((delay_seconds, callback))

    def run_all(self) -> None:
        while self.pending:
            _, callback = self.pending.pop(0)
            callback()


class FailingGeolocator:
    def locate(self) -> Coordinates:
        raise GeolocationError("denied")


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def map_surface() -> RecordingMap:
    return RecordingMap()


@pytest.fixture()
def list_surface() -> RecordingList:
    return RecordingList()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture()
def store(tmp_path: Path) -> WorkoutStore:
    return WorkoutStore(tmp_path / "storage.json")


@pytest.fixture()
def make_controller(map_surface, list_surface, notifier, scheduler, store):
    def _make(geolocator: Any = None, clock: Optional[Callable[[], datetime]] = lambda: FIXED_NOW) -> AppController:
        return AppController(
            map_surface=map_surface,
            list_surface=list_surface,
            store=store,
            notifier=notifier,
            scheduler=scheduler,
            geolocator=geolocator or StaticGeolocator((51.5, -0.1)),
            clock=clock,
        )

    return _make


@pytest.fixture()
def controller(make_controller) -> AppController:
    return make_controller()


@pytest.fixture()
def write_config(tmp_path: Path):
    def _write(content: str = "") -> Path:
        storage = tmp_path / "data" / "storage.json"
        map_output = tmp_path / "data" / "map.html"
        path = tmp_path / "config.toml"
        body = f"""
[storage]
path = "{storage.as_posix()}"

[map]
output = "{map_output.as_posix()}"
{content}
"""
        path.write_text(body.strip() + "\n")
        return path

    return _write


@pytest.fixture()
def failing_geolocator() -> FailingGeolocator:
    return FailingGeolocator()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MAPTY_CONFIG_FILE", "MAPTY_DATA_DIR", "MAPTY_STORAGE_FILE", "MAPTY_MAP_OUTPUT"):
        monkeypatch.delenv(name, raising=False)
