"""Reverse-geocoded location labels."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"
LOCATION_NOT_FOUND = "Location not found"
LOCATION_ACCESS_FAILED = "Location access failed"
# Stored when the client cannot or will not report coordinates.
LOCATION_UNAVAILABLE = "Could not determine location"
# Written to history when no location was ever resolved.
LOCATION_NOT_AVAILABLE = "Location not available"

_LOCALITY_KEYS = ("village", "suburb", "neighbourhood")
_MUNICIPALITY_KEYS = ("town", "city", "county")
_REGION_KEYS = ("state", "region")


class GeocodingClient(Protocol):
    """Interface for reverse-geocoding lookups."""

    async def reverse(
        self, latitude: float, longitude: float
    ) -> dict[str, object] | None:
        """Return the raw reverse-geocoding payload, or None when not found."""


@dataclass
class LocationResolver:
    """Turns coordinates into a short, displayable place label."""

    client: GeocodingClient

    async def resolve(self, latitude: float, longitude: float) -> str:
        """Return a place label; never raises."""
        try:
            payload = await self.client.reverse(latitude, longitude)
        except Exception:
            logger.exception(
                "Reverse geocoding failed",
                extra={"latitude": latitude, "longitude": longitude},
            )
            return LOCATION_ACCESS_FAILED
        if not isinstance(payload, dict) or "error" in payload:
            return LOCATION_NOT_FOUND
        try:
            return format_location(payload)
        except Exception:
            logger.exception("Unreadable geocoding payload")
            return LOCATION_NOT_FOUND


def format_location(payload: dict[str, object]) -> str:
    """Compose "locality, municipality, region" from a geocoding payload."""
    address = payload.get("address")
    parts: list[str] = []
    if isinstance(address, dict):
        for keys in (_LOCALITY_KEYS, _MUNICIPALITY_KEYS, _REGION_KEYS):
            part = _first_present(address, keys)
            if part:
                parts.append(part)
    if parts:
        return ", ".join(parts)
    display_name = payload.get("display_name")
    if isinstance(display_name, str) and display_name.strip():
        return display_name
    return UNKNOWN_LOCATION


def _first_present(address: dict[str, object], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = address.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
