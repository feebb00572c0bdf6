"""Formatting helpers for markers, list rows and console output."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from mapty.core.constants import KIND_ICONS, UNIT_LABELS
from mapty.core.models import RunningWorkout, Workout


def format_number(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_metric(value: float) -> str:
    """Derived metrics are shown with two decimals."""
    return f"{float(value):.2f}"


def kind_icon(workout: Workout) -> str:
    return KIND_ICONS[workout.kind.value]


def popup_text(workout: Workout) -> str:
    """Marker popup content, e.g. '🏃‍♂️ Running on April 14'."""
    return f"{kind_icon(workout)} {workout.description}"


def popup_class(workout: Workout) -> str:
    return f"{workout.kind.value}-popup"


def format_coords(coords: Tuple[float, float]) -> str:
    return f"{coords[0]:.5f},{coords[1]:.5f}"


def summary_fields(workout: Workout) -> List[Tuple[str, str, str]]:
    """(icon, value, unit) triples for one list row."""
    fields = [
        (kind_icon(workout), format_number(workout.distance_km), UNIT_LABELS["distance"]),
        ("⏱", format_number(workout.duration_min), UNIT_LABELS["duration"]),
    ]
    if isinstance(workout, RunningWorkout):
        fields.append(("⚡️", format_metric(workout.pace_min_per_km), UNIT_LABELS["pace"]))
        fields.append(("🦶🏼", format_number(workout.cadence_spm), UNIT_LABELS["cadence"]))
    else:
        fields.append(("⚡️", format_metric(workout.speed_km_per_h), UNIT_LABELS["speed"]))
        fields.append(("⛰", format_number(workout.elevation_gain_m), UNIT_LABELS["elevation"]))
    return fields


def summary_text(workout: Workout) -> str:
    """Single-line summary used for plain output."""
    parts = [f"{value} {unit}" for _, value, unit in summary_fields(workout)]
    return f"{workout.description}: " + ", ".join(parts)


def summary_payload(workout: Workout) -> Dict[str, Any]:
    """JSON-friendly summary of one workout."""
    payload: Dict[str, Any] = {
        "id": workout.id,
        "type": workout.kind.value,
        "description": workout.description,
        "date": workout.created_at.isoformat(),
        "coords": list(workout.coords),
        "distance_km": workout.distance_km,
        "duration_min": workout.duration_min,
    }
    if isinstance(workout, RunningWorkout):
        payload["cadence_spm"] = workout.cadence_spm
        payload["pace_min_per_km"] = round(workout.pace_min_per_km, 2)
    else:
        payload["elevation_gain_m"] = workout.elevation_gain_m
        payload["speed_km_per_h"] = round(workout.speed_km_per_h, 2)
    return payload
