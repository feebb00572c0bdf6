from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import pytest
import typer
from rich.console import Console

from mapty.commands.common import build_session, get_state, print_json_payload, start_session
from mapty.core.controller import ControllerState
from mapty.core.state import CLIState


@dataclass
class FakeContext:
    obj: Any


def _state(tmp_path: Path, config: Dict[str, Any] | None = None, plain: bool = True) -> CLIState:
    return CLIState(
        json_output=False,
        plain_output=plain,
        verbose=False,
        quiet=False,
        config_path=tmp_path / "config.toml",
        config=config
        or {
            "storage": {"path": str(tmp_path / "storage.json"), "key": "sessions"},
            "map": {"home": [51.5, -0.1], "zoom": 11},
            "ui": {"form_relayout_delay": 0.5},
        },
        console=Console(record=True),
    )


def test_get_state_returns_cli_state(tmp_path: Path) -> None:
    state = _state(tmp_path)
    assert get_state(FakeContext(obj=state)) is state


def test_get_state_raises_on_invalid_obj() -> None:
    with pytest.raises(typer.Exit):
        get_state(FakeContext(obj={"not": "state"}))


def test_print_json_payload_plain_is_compact(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    print_json_payload(_state(tmp_path), {"status": "created", "description": "Running on April 14"})
    out = capsys.readouterr().out
    assert out.strip() == '{"status":"created","description":"Running on April 14"}'


def test_print_json_payload_rich(tmp_path: Path) -> None:
    state = _state(tmp_path, plain=False)
    print_json_payload(state, {"total": 2})
    assert json.loads(state.console.export_text()) == {"total": 2}


def test_build_session_uses_configured_settings(tmp_path: Path) -> None:
    session = build_session(_state(tmp_path))
    assert session.store.path == (tmp_path / "storage.json").resolve()
    assert session.store.key == "sessions"
    assert session.controller.zoom == 11
    assert session.controller.relayout_delay == 0.5
    assert session.controller.map is session.map_surface
    assert session.controller.form is session.list_surface
    assert session.list_surface.plain is True


def test_start_session_centers_on_home(tmp_path: Path) -> None:
    session = start_session(_state(tmp_path))
    assert session.map_surface.center == (51.5, -0.1)
    assert session.map_surface.zoom == 11
    assert session.controller.state is ControllerState.IDLE


def test_start_session_location_override(tmp_path: Path) -> None:
    session = start_session(_state(tmp_path), location=(40.4, -3.7))
    assert session.map_surface.center == (40.4, -3.7)


def test_start_session_without_position_exits(tmp_path: Path) -> None:
    state = _state(tmp_path, config={"storage": {"path": str(tmp_path / "s.json")}, "map": {}})
    with pytest.raises(typer.Exit) as excinfo:
        start_session(state)
    assert excinfo.value.exit_code == 1


def test_start_session_json_prints_error_payload(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    state = _state(tmp_path, config={"storage": {"path": str(tmp_path / "s.json")}, "map": {}})
    state.json_output = True
    with pytest.raises(typer.Exit):
        start_session(state)
    assert json.loads(capsys.readouterr().out) == {"status": "error", "message": "Couldn't get the location."}
