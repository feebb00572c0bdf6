"""Durable key-value slot holding the serialized workout list."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from mapty.core.constants import STORAGE_KEY
from mapty.core.models import CyclingWorkout, RunningWorkout, Workout, WorkoutKind

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when a stored payload cannot be decoded."""


def workout_to_dict(workout: Workout) -> Dict[str, Any]:
    """Serialize a workout using the browser storage field names."""
    payload: Dict[str, Any] = {
        "id": workout.id,
        "date": workout.created_at.isoformat(),
        "type": workout.kind.value,
        "coords": [workout.coords[0], workout.coords[1]],
        "distance": workout.distance_km,
        "duration": workout.duration_min,
        "description": workout.description,
    }
    if isinstance(workout, RunningWorkout):
        payload["cadence"] = workout.cadence_spm
        payload["pace"] = workout.pace_min_per_km
    else:
        payload["elevation"] = workout.elevation_gain_m
        payload["speed"] = workout.speed_km_per_h
    return payload


def workout_from_dict(data: Dict[str, Any]) -> Workout:
    """Rebuild the typed variant named by ``type``, keeping stored derived values."""
    try:
        kind = WorkoutKind(data["type"])
        lat, lng = data["coords"]
        common = {
            "id": str(data["id"]),
            "created_at": datetime.fromisoformat(data["date"]),
            "coords": (float(lat), float(lng)),
            "distance_km": float(data["distance"]),
            "duration_min": float(data["duration"]),
            "description": str(data["description"]),
        }
        if kind is WorkoutKind.RUNNING:
            return RunningWorkout(
                cadence_spm=float(data["cadence"]),
                pace_min_per_km=float(data["pace"]),
                **common,
            )
        return CyclingWorkout(
            elevation_gain_m=float(data["elevation"]),
            speed_km_per_h=float(data["speed"]),
            **common,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Invalid stored workout {data!r}: {exc}") from exc


class WorkoutStore:
    """JSON document on disk; one named slot holds the whole workout list."""

    def __init__(self, path: Path, key: str = STORAGE_KEY) -> None:
        self.path = path
        self.key = key

    def _read_document(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            document = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise StorageError(f"Invalid JSON in storage file {self.path}: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"Storage file {self.path} must contain an object at the root")
        return document

    def load(self) -> Optional[List[Workout]]:
        """Return the saved workouts, or None when nothing was saved yet."""
        document = self._read_document()
        if document is None or self.key not in document:
            logger.debug("No stored workouts at %s[%s]", self.path, self.key)
            return None

        entries = document[self.key]
        if not isinstance(entries, list):
            raise StorageError(f"Slot {self.key!r} in {self.path} must hold a list")
        for entry in entries:
            if not isinstance(entry, dict):
                raise StorageError(f"Invalid stored workout {entry!r}")

        workouts = [workout_from_dict(entry) for entry in entries]
        logger.debug("Loaded %d workouts from %s", len(workouts), self.path)
        return workouts

    def save(self, workouts: Sequence[Workout]) -> Path:
        """Overwrite the slot with the full ordered list."""
        try:
            document = self._read_document() or {}
        except StorageError:
            logger.warning("Replacing unreadable storage file %s", self.path)
            document = {}
        document[self.key] = [workout_to_dict(workout) for workout in workouts]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as handle:
                handle.write(json.dumps(document, indent=2, ensure_ascii=False) + "\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved %d workouts to %s", len(workouts), self.path)
        return self.path
