"""Starting-position lookup for the map."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from mapty.core.constants import IP_GEOLOCATION_URL
from mapty.core.models import Coordinates

logger = logging.getLogger(__name__)


class GeolocationError(RuntimeError):
    """Raised when no starting position can be determined."""


class Geolocator(Protocol):
    def locate(self) -> Coordinates: ...


class StaticGeolocator:
    """Fixed position, usually the configured home."""

    def __init__(self, coords: Coordinates) -> None:
        self.coords = coords

    def locate(self) -> Coordinates:
        return self.coords


class IPGeolocator:
    """Approximate position from an IP geolocation service."""

    def __init__(self, url: str = IP_GEOLOCATION_URL, timeout_seconds: float = 10) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds

    def locate(self) -> Coordinates:
        try:
            response = requests.get(self.url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise GeolocationError(f"Geolocation lookup failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise GeolocationError("Geolocation response is not an object")
        lat = payload.get("latitude", payload.get("lat"))
        lng = payload.get("longitude", payload.get("lon"))
        if lat is None or lng is None:
            raise GeolocationError("Geolocation response has no coordinates")
        logger.debug("IP geolocation resolved to %s,%s", lat, lng)
        return float(lat), float(lng)


class UnavailableGeolocator:
    """Used when neither a home position nor IP lookup is configured."""

    def locate(self) -> Coordinates:
        raise GeolocationError("No home position configured and IP geolocation disabled")


def geolocator_from_config(
    config: Dict[str, Any],
    override: Optional[Coordinates] = None,
) -> Geolocator:
    """Pick a geolocator: explicit override, configured home, then IP lookup."""
    if override is not None:
        return StaticGeolocator(override)

    map_cfg = config.get("map", {})
    home = map_cfg.get("home") or []
    if len(home) == 2:
        return StaticGeolocator((float(home[0]), float(home[1])))

    if map_cfg.get("geolocate_ip", False):
        return IPGeolocator(
            url=str(map_cfg.get("geolocation_url") or IP_GEOLOCATION_URL),
            timeout_seconds=float(map_cfg.get("timeout_seconds", 10)),
        )
    return UnavailableGeolocator()
