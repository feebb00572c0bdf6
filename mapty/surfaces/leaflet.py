"""Map surface that renders workout markers into a Leaflet HTML page."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from mapty.core.constants import DEFAULT_ZOOM, TILE_ATTRIBUTION, TILE_URL
from mapty.core.models import Coordinates
from mapty.core.surfaces import ClickHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    coords: Coordinates
    popup_text: str
    style_class: str


class LeafletMapSurface:
    """Collects the map view and markers; ``write`` produces the page."""

    def __init__(self) -> None:
        self.center: Optional[Coordinates] = None
        self.zoom = DEFAULT_ZOOM
        self.markers: List[Marker] = []
        self._click_handler: Optional[ClickHandler] = None

    def on_click(self, handler: ClickHandler) -> None:
        self._click_handler = handler

    def click(self, coords: Coordinates) -> Any:
        """Simulate a click on the map at ``coords``."""
        if self._click_handler is None:
            raise RuntimeError("Map is not loaded; no click handler registered")
        return self._click_handler(coords)

    def place_marker(self, coords: Coordinates, popup_text: str, style_class: str) -> None:
        self.markers.append(Marker(coords=coords, popup_text=popup_text, style_class=style_class))

    def center_on(self, coords: Coordinates, zoom: int) -> None:
        self.center = coords
        self.zoom = zoom

    def to_html(self, title: str = "mapty") -> str:
        return render_map_html(self.center, self.zoom, self.markers, title=title)

    def write(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_html())
        logger.debug("Wrote map with %d markers to %s", len(self.markers), path)
        return path


def _markers_json(markers: List[Marker]) -> List[Dict[str, Any]]:
    return [
        {"coords": [marker.coords[0], marker.coords[1]], "text": marker.popup_text, "className": marker.style_class}
        for marker in markers
    ]


def render_map_html(
    center: Optional[Coordinates],
    zoom: int,
    markers: List[Marker],
    title: str = "mapty",
) -> str:
    """Generate a standalone HTML page with one popup marker per workout."""
    if center is None and markers:
        center = markers[-1].coords
    if center is None:
        view = [0.0, 0.0]
        zoom = 2
    else:
        view = [center[0], center[1]]

    # json.dumps escapes quotes; "</" is escaped so popup text cannot close the script tag.
    markers_js = json.dumps(_markers_json(markers), ensure_ascii=False).replace("</", "<\\/")

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css">
    <style>
        body {{ margin: 0; padding: 0; }}
        #map {{ position: absolute; top: 0; bottom: 0; width: 100%; }}
        .running-popup .leaflet-popup-content-wrapper {{ border-left: 5px solid #00c46a; }}
        .cycling-popup .leaflet-popup-content-wrapper {{ border-left: 5px solid #ffb545; }}
    </style>
</head>
<body>
    <div id="map"></div>
    <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js"></script>
    <script>
        var map = L.map('map').setView({json.dumps(view)}, {int(zoom)});

        L.tileLayer({json.dumps(TILE_URL)}, {{
            attribution: {json.dumps(TILE_ATTRIBUTION)}
        }}).addTo(map);

        var markers = {markers_js};
        markers.forEach(function(marker) {{
            L.marker(marker.coords).addTo(map)
                .bindPopup(L.popup({{
                    maxWidth: 250,
                    minWidth: 100,
                    autoClose: false,
                    closeOnClick: false,
                    className: marker.className
                }}))
                .setPopupContent(marker.text)
                .openPopup();
        }});
    </script>
</body>
</html>
"""
