"""Application controller: map clicks, form submissions and rehydration."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Tuple

from mapty.core.constants import (
    CORRUPT_STORAGE_MESSAGE,
    DEFAULT_ZOOM,
    FORM_RELAYOUT_DELAY,
    GEOLOCATION_MESSAGE,
)
from mapty.core.geolocation import GeolocationError, Geolocator
from mapty.core.models import Coordinates, Workout, create_workout
from mapty.core.storage import StorageError, WorkoutStore
from mapty.core.surfaces import ListSurface, MapSurface, Notifier, Scheduler
from mapty.core.validation import ValidationError, parse_form_fields
from mapty.utils.formatting import format_coords, popup_class, popup_text

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    IDLE = "idle"
    AWAITING_SUBMISSION = "awaiting_submission"


class ControllerStateError(RuntimeError):
    """Raised when an event arrives in a state that cannot accept it."""


class AppController:
    """Owns the workout list and fans new workouts out to map, list and store.

    Transitions:
        IDLE --map click--> AWAITING_SUBMISSION
        AWAITING_SUBMISSION --map click--> AWAITING_SUBMISSION (pending coords replaced)
        AWAITING_SUBMISSION --invalid submit--> AWAITING_SUBMISSION
        AWAITING_SUBMISSION --valid submit / cancel--> IDLE
    """

    def __init__(
        self,
        map_surface: MapSurface,
        list_surface: ListSurface,
        store: WorkoutStore,
        notifier: Notifier,
        scheduler: Scheduler,
        geolocator: Optional[Geolocator] = None,
        zoom: int = DEFAULT_ZOOM,
        relayout_delay: float = FORM_RELAYOUT_DELAY,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.map = map_surface
        self.form = list_surface
        self.store = store
        self.notifier = notifier
        self.scheduler = scheduler
        self.geolocator = geolocator
        self.zoom = zoom
        self.relayout_delay = relayout_delay
        self._clock = clock
        self._state = ControllerState.IDLE
        self._pending: Optional[Coordinates] = None
        self._workouts: List[Workout] = []

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def pending_coords(self) -> Optional[Coordinates]:
        return self._pending

    @property
    def workouts(self) -> Tuple[Workout, ...]:
        return tuple(self._workouts)

    def start(self) -> bool:
        """Locate the user, prepare the map and restore saved workouts.

        Returns False, after a single alert, when no position is available.
        """
        if self.geolocator is None:
            raise ControllerStateError("No geolocator configured")
        try:
            position = self.geolocator.locate()
        except GeolocationError as exc:
            logger.warning("Geolocation failed: %s", exc)
            self.notifier.alert(GEOLOCATION_MESSAGE)
            return False

        self.map.center_on(position, self.zoom)
        self.map.on_click(self.on_map_click)
        self.form.on_submit(self.on_form_submit)
        self.on_startup()
        return True

    def on_startup(self) -> int:
        """Replace the in-memory list with stored workouts and render each once."""
        try:
            loaded = self.store.load()
        except StorageError as exc:
            logger.error("Ignoring unreadable workout storage: %s", exc)
            self.notifier.alert(CORRUPT_STORAGE_MESSAGE)
            self._workouts = []
            return 0

        if loaded is None:
            return 0

        self._workouts = list(loaded)
        for workout in self._workouts:
            self._render_marker(workout)
            self.form.render_summary_row(workout)
        logger.debug("Rehydrated %d workouts", len(self._workouts))
        return len(self._workouts)

    def on_map_click(self, coords: Coordinates) -> None:
        if self._state is ControllerState.AWAITING_SUBMISSION:
            logger.debug("Replacing pending coordinates %s", format_coords(self._pending or coords))
        self._pending = (float(coords[0]), float(coords[1]))
        self._state = ControllerState.AWAITING_SUBMISSION
        self.form.reveal()
        self.form.focus_first_field()

    def on_type_change(self) -> None:
        self.form.toggle_alternate_field_visibility()

    def on_form_submit(self, raw_fields: Mapping[str, Any]) -> Optional[Workout]:
        """Validate and record a workout; None when the input was rejected."""
        if self._state is not ControllerState.AWAITING_SUBMISSION or self._pending is None:
            raise ControllerStateError("Form submitted without a pending map click")

        try:
            form_input = parse_form_fields(raw_fields)
        except ValidationError as exc:
            logger.info("Rejected workout input: %s", exc.reason)
            self.notifier.alert(str(exc))
            return None

        workout = create_workout(
            form_input.kind,
            self._pending,
            form_input.distance_km,
            form_input.duration_min,
            form_input.extra,
            now=self._clock() if self._clock else None,
        )

        self._render_marker(workout)
        self._workouts.append(workout)
        self.form.render_summary_row(workout)
        self.store.save(self._workouts)
        self._hide_form()

        self._pending = None
        self._state = ControllerState.IDLE
        logger.debug("Recorded %s workout %s", workout.kind.value, workout.id)
        return workout

    def cancel(self) -> bool:
        """Drop the pending click and close the form."""
        if self._state is not ControllerState.AWAITING_SUBMISSION:
            return False
        self._hide_form()
        self._pending = None
        self._state = ControllerState.IDLE
        return True

    def _render_marker(self, workout: Workout) -> None:
        self.map.place_marker(workout.coords, popup_text(workout), popup_class(workout))

    def _hide_form(self) -> None:
        self.form.clear_fields()
        self.form.hide()
        self.scheduler.call_later(self.relayout_delay, self.form.restore_layout)
