"""Event data models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any

from restaurant_signals.reference.impact import UNKNOWN_CATEGORY


@dataclass(frozen=True)
class EventListing:
    """One event as listed by the provider, before enrichment."""

    id: str
    name: str
    local_date: date
    local_time: str | None
    venue_name: str
    venue_lat: float
    venue_lon: float
    category: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> EventListing:
        """
        Parse a Discovery event dict.

        Category is the first classification's segment name, or ``Unknown``.

        Raises:
            KeyError, IndexError, TypeError, ValueError: If required fields
                are missing or venue coordinates are not numbers.
        """
        start = raw["dates"]["start"]
        venue = raw["_embedded"]["venues"][0]
        lat = float(venue["location"]["latitude"])
        lon = float(venue["location"]["longitude"])
        if not (math.isfinite(lat) and math.isfinite(lon)) or abs(lat) > 90 or abs(lon) > 180:
            msg = f"Venue coordinates out of range: ({lat}, {lon})"
            raise ValueError(msg)

        classifications = raw.get("classifications") or []
        segment = (classifications[0].get("segment") or {}) if classifications else {}

        return cls(
            id=str(raw["id"]),
            name=raw["name"],
            local_date=date.fromisoformat(start["localDate"]),
            local_time=start.get("localTime"),
            venue_name=venue["name"],
            venue_lat=lat,
            venue_lon=lon,
            category=segment.get("name") or UNKNOWN_CATEGORY,
        )
