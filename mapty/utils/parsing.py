"""Parsing helpers for CLI coordinates and workout entry files."""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml

from mapty.core.models import Coordinates

_COORDS_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*[,;\s]\s*(-?\d+(?:\.\d+)?)\s*$")


def parse_coords(value: str) -> Coordinates:
    """Parse 'lat,lng' into a coordinate pair."""
    match = _COORDS_RE.match(value)
    if not match:
        raise ValueError(f"Invalid coordinates '{value}'. Expected LAT,LNG (e.g. 51.5,-0.1)")
    return _checked_coords(float(match.group(1)), float(match.group(2)), value)


def _checked_coords(lat: float, lng: float, raw: Any) -> Coordinates:
    if not math.isfinite(lat) or not math.isfinite(lng):
        raise ValueError(f"Coordinates must be finite numbers: {raw!r}")
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValueError(f"Coordinates out of range: {raw}")
    return lat, lng


def validate_coords(value: Optional[str]) -> Optional[str]:
    """Typer callback that validates LAT,LNG arguments."""
    if value is None:
        return value
    try:
        parse_coords(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc))
    return value


def entry_coords(entry: Dict[str, Any]) -> Coordinates:
    """Coordinates of a file entry given as [lat, lng] or 'lat,lng'."""
    raw = entry.get("coords")
    if isinstance(raw, str):
        return parse_coords(raw)
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        try:
            lat, lng = float(raw[0]), float(raw[1])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Entry coords must be numbers: {raw!r}") from exc
        return _checked_coords(lat, lng, raw)
    raise ValueError(f"Entry has no usable coords: {entry!r}")


def load_entries(file_path: Optional[Path], read_stdin: bool = False, stdin_text: str = "") -> List[Dict[str, Any]]:
    """Load workout form entries from a JSON/YAML file or stdin text."""
    raw_data: Any
    if file_path:
        text = file_path.read_text()
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            raw_data = yaml.safe_load(text)
        else:
            raw_data = json.loads(text)
    elif read_stdin:
        text = stdin_text.strip()
        if not text:
            return []
        try:
            raw_data = json.loads(text)
        except json.JSONDecodeError:
            raw_data = yaml.safe_load(text)
    else:
        return []

    if isinstance(raw_data, dict):
        return [raw_data]
    if isinstance(raw_data, list):
        return [item for item in raw_data if isinstance(item, dict)]
    return []


def split_entry(entry: Dict[str, Any]) -> Tuple[Coordinates, Dict[str, Any]]:
    """Separate the map position from the form fields of an entry."""
    fields = {key: value for key, value in entry.items() if key != "coords"}
    return entry_coords(entry), fields
