"""Workout value types and derived metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from mapty.core.constants import ID_DIGITS, MONTHS

Coordinates = Tuple[float, float]


class WorkoutKind(str, Enum):
    """Discriminant for the workout variants."""

    RUNNING = "running"
    CYCLING = "cycling"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class _WorkoutBase:
    id: str
    created_at: datetime
    coords: Coordinates
    distance_km: float
    duration_min: float
    description: str


@dataclass(frozen=True)
class RunningWorkout(_WorkoutBase):
    """A run with cadence and pace."""

    cadence_spm: float
    pace_min_per_km: float
    kind: WorkoutKind = field(default=WorkoutKind.RUNNING, init=False)


@dataclass(frozen=True)
class CyclingWorkout(_WorkoutBase):
    """A ride with elevation gain and speed."""

    elevation_gain_m: float
    speed_km_per_h: float
    kind: WorkoutKind = field(default=WorkoutKind.CYCLING, init=False)


Workout = Union[RunningWorkout, CyclingWorkout]


def make_workout_id(now: datetime) -> str:
    """Build a time-based id from the trailing digits of epoch milliseconds."""
    millis = int(now.timestamp() * 1000)
    return str(millis)[-ID_DIGITS:]


def describe(kind: WorkoutKind, when: datetime) -> str:
    """Return e.g. 'Running on April 14'."""
    return f"{kind.label} on {MONTHS[when.month - 1]} {when.day}"


def calc_pace(distance_km: float, duration_min: float) -> float:
    """Minutes per kilometre."""
    return duration_min / distance_km


def calc_speed(distance_km: float, duration_min: float) -> float:
    """Kilometres per hour."""
    return distance_km / (duration_min / 60)


def create_workout(
    kind: WorkoutKind,
    coords: Coordinates,
    distance_km: float,
    duration_min: float,
    extra: float,
    now: Optional[datetime] = None,
) -> Workout:
    """Construct a workout variant with its derived fields filled in.

    ``extra`` is the cadence for runs and the elevation gain for rides.
    Numeric inputs are not validated here; callers check them first.
    """
    kind = WorkoutKind(kind)
    created_at = now or datetime.now().astimezone()
    lat, lng = coords
    common = {
        "id": make_workout_id(created_at),
        "created_at": created_at,
        "coords": (float(lat), float(lng)),
        "distance_km": distance_km,
        "duration_min": duration_min,
        "description": describe(kind, created_at),
    }

    if kind is WorkoutKind.RUNNING:
        return RunningWorkout(
            cadence_spm=extra,
            pace_min_per_km=calc_pace(distance_km, duration_min),
            **common,
        )
    return CyclingWorkout(
        elevation_gain_m=extra,
        speed_km_per_h=calc_speed(distance_km, duration_min),
        **common,
    )


def derived_metric(workout: Workout) -> float:
    """Pace for runs, speed for rides."""
    if workout.kind is WorkoutKind.RUNNING:
        return workout.pace_min_per_km  # type: ignore[union-attr]
    return workout.speed_km_per_h  # type: ignore[union-attr]


def extra_metric(workout: Workout) -> float:
    """Cadence for runs, elevation gain for rides."""
    if workout.kind is WorkoutKind.RUNNING:
        return workout.cadence_spm  # type: ignore[union-attr]
    return workout.elevation_gain_m  # type: ignore[union-attr]
