"""Form input parsing and validation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from mapty.core.constants import VALIDATION_MESSAGE
from mapty.core.models import WorkoutKind


class ValidationError(ValueError):
    """Raised when submitted form fields are rejected."""

    def __init__(self, message: str = VALIDATION_MESSAGE, reason: str = "") -> None:
        super().__init__(message)
        self.reason = reason


@dataclass(frozen=True)
class FormInput:
    """Parsed and validated form fields."""

    kind: WorkoutKind
    distance_km: float
    duration_min: float
    extra: float


def to_number(value: Any) -> float:
    """Coerce a raw field the way a browser form input does.

    Blank strings become 0, unparseable text becomes NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def all_finite(*values: float) -> bool:
    return all(math.isfinite(value) for value in values)


def all_positive(*values: float) -> bool:
    return all(value > 0 for value in values)


def parse_kind(value: Any) -> WorkoutKind:
    raw = str(value or "").strip().lower()
    try:
        return WorkoutKind(raw)
    except ValueError:
        raise ValidationError(reason=f"unknown workout type {raw!r}") from None


def parse_form_fields(raw: Mapping[str, Any]) -> FormInput:
    """Parse raw form fields into a FormInput or raise ValidationError.

    Runs need distance, duration and cadence to be finite and positive.
    Rides need the same for distance and duration, while elevation only has
    to be finite and may be zero or negative.
    """
    kind = parse_kind(raw.get("type"))
    distance = to_number(raw.get("distance"))
    duration = to_number(raw.get("duration"))

    if kind is WorkoutKind.RUNNING:
        cadence = to_number(raw.get("cadence"))
        if not all_finite(distance, duration, cadence):
            raise ValidationError(reason="non-finite input")
        if not all_positive(distance, duration, cadence):
            raise ValidationError(reason="non-positive input")
        return FormInput(kind=kind, distance_km=distance, duration_min=duration, extra=cadence)

    elevation = to_number(raw.get("elevation"))
    if not all_finite(distance, duration, elevation):
        raise ValidationError(reason="non-finite input")
    if not all_positive(distance, duration):
        raise ValidationError(reason="non-positive input")
    return FormInput(kind=kind, distance_km=distance, duration_min=duration, extra=elevation)
