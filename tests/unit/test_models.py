from __future__ import annotations

import dataclasses
import math
from datetime import datetime, timezone

import pytest

from mapty.core.models import (
    CyclingWorkout,
    RunningWorkout,
    WorkoutKind,
    calc_pace,
    calc_speed,
    create_workout,
    derived_metric,
    describe,
    extra_metric,
    make_workout_id,
)


def test_running_workout_derives_pace_and_description(fixed_now: datetime) -> None:
    workout = create_workout(WorkoutKind.RUNNING, (51.5, -0.1), 5.0, 25.0, 180.0, now=fixed_now)
    assert isinstance(workout, RunningWorkout)
    assert workout.kind is WorkoutKind.RUNNING
    assert workout.pace_min_per_km == pytest.approx(5.0)
    assert workout.cadence_spm == 180.0
    assert workout.description == "Running on April 14"
    assert "Running" in workout.description


@pytest.mark.parametrize("elevation", [350.0, 0.0, -10.0])
def test_cycling_workout_accepts_any_elevation(fixed_now: datetime, elevation: float) -> None:
    workout = create_workout(WorkoutKind.CYCLING, (51.5, -0.1), 20.0, 60.0, elevation, now=fixed_now)
    assert isinstance(workout, CyclingWorkout)
    assert workout.speed_km_per_h == pytest.approx(20.0)
    assert workout.elevation_gain_m == elevation
    assert workout.description == "Cycling on April 14"


def test_create_workout_accepts_kind_string(fixed_now: datetime) -> None:
    workout = create_workout("cycling", (1, 2), 10.0, 30.0, 5.0, now=fixed_now)  # type: ignore[arg-type]
    assert workout.kind is WorkoutKind.CYCLING
    assert workout.coords == (1.0, 2.0)


def test_create_workout_rejects_unknown_kind(fixed_now: datetime) -> None:
    with pytest.raises(ValueError):
        create_workout("swimming", (0, 0), 1.0, 1.0, 1.0, now=fixed_now)  # type: ignore[arg-type]


def test_workout_is_immutable(fixed_now: datetime) -> None:
    workout = create_workout(WorkoutKind.RUNNING, (0.0, 0.0), 5.0, 25.0, 170.0, now=fixed_now)
    with pytest.raises(dataclasses.FrozenInstanceError):
        workout.description = "changed"  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        workout.kind = WorkoutKind.CYCLING  # type: ignore[misc]


def test_same_inputs_in_different_months_differ_only_in_time_fields() -> None:
    may = datetime(2026, 5, 3, 9, 0, tzinfo=timezone.utc)
    june = datetime(2026, 6, 3, 9, 0, tzinfo=timezone.utc)
    first = create_workout(WorkoutKind.RUNNING, (10.0, 20.0), 8.0, 40.0, 175.0, now=may)
    second = create_workout(WorkoutKind.RUNNING, (10.0, 20.0), 8.0, 40.0, 175.0, now=june)

    assert first.description == "Running on May 3"
    assert second.description == "Running on June 3"
    assert first.id != second.id
    assert dataclasses.replace(first, id=second.id, created_at=june, description=second.description) == second


def test_make_workout_id_uses_trailing_millisecond_digits(fixed_now: datetime) -> None:
    millis = str(int(fixed_now.timestamp() * 1000))
    workout_id = make_workout_id(fixed_now)
    assert len(workout_id) == 10
    assert workout_id == millis[-10:]


def test_describe_uses_given_timestamp() -> None:
    when = datetime(2026, 12, 31, 23, 59, tzinfo=timezone.utc)
    assert describe(WorkoutKind.CYCLING, when) == "Cycling on December 31"


def test_metric_helpers() -> None:
    assert calc_pace(4.0, 22.0) == pytest.approx(5.5)
    assert calc_speed(30.0, 90.0) == pytest.approx(20.0)
    assert math.isclose(calc_speed(1.0, 1.0), 60.0)


def test_derived_and_extra_metric_dispatch_on_kind(fixed_now: datetime) -> None:
    run = create_workout(WorkoutKind.RUNNING, (0, 0), 10.0, 50.0, 170.0, now=fixed_now)
    ride = create_workout(WorkoutKind.CYCLING, (0, 0), 40.0, 120.0, 300.0, now=fixed_now)
    assert derived_metric(run) == pytest.approx(5.0)
    assert derived_metric(ride) == pytest.approx(20.0)
    assert extra_metric(run) == 170.0
    assert extra_metric(ride) == 300.0


def test_default_clock_sets_created_at() -> None:
    workout = create_workout(WorkoutKind.RUNNING, (0, 0), 5.0, 25.0, 180.0)
    assert workout.created_at.tzinfo is not None
    assert workout.id.isdigit()
