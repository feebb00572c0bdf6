"""Static constants and mappings for mapty."""

from __future__ import annotations

STORAGE_KEY = "workouts"

DEFAULT_ZOOM = 13
FORM_RELAYOUT_DELAY = 1.0

ID_DIGITS = 10

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

KIND_ICONS = {"running": "🏃‍♂️", "cycling": "🚴‍♂️"}

UNIT_LABELS = {
    "distance": "km",
    "duration": "min",
    "cadence": "spm",
    "pace": "min/km",
    "elevation": "m",
    "speed": "km/h",
}

VALIDATION_MESSAGE = "Input should be positive integer."
GEOLOCATION_MESSAGE = "Couldn't get the location."
CORRUPT_STORAGE_MESSAGE = "Stored workouts could not be read; starting with an empty list."

IP_GEOLOCATION_URL = "https://ipapi.co/json/"

TILE_URL = "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
)
