"""Interfaces the controller drives: map, form/list, notifications, timers."""

from __future__ import annotations

from typing import Any, Callable, Dict, Protocol

from mapty.core.models import Coordinates, Workout

ClickHandler = Callable[[Coordinates], Any]
SubmitHandler = Callable[[Dict[str, Any]], Any]


class MapSurface(Protocol):
    def on_click(self, handler: ClickHandler) -> None: ...

    def place_marker(self, coords: Coordinates, popup_text: str, style_class: str) -> None: ...

    def center_on(self, coords: Coordinates, zoom: int) -> None: ...


class ListSurface(Protocol):
    """Entry form plus the rendered workout list."""

    def on_submit(self, handler: SubmitHandler) -> None: ...

    def reveal(self) -> None: ...

    def hide(self) -> None: ...

    def restore_layout(self) -> None: ...

    def clear_fields(self) -> None: ...

    def focus_first_field(self) -> None: ...

    def toggle_alternate_field_visibility(self) -> None: ...

    def render_summary_row(self, workout: Workout) -> None: ...


class Notifier(Protocol):
    def alert(self, message: str) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], Any]) -> None: ...
