"""Great-circle distance between two points."""

from __future__ import annotations

import math

from restaurant_signals.enrichment.rounding import round_half_up

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance in kilometres between two points, rounded to one decimal.

    Args:
        lat1: Latitude of the first point (decimal degrees).
        lon1: Longitude of the first point.
        lat2: Latitude of the second point.
        lon2: Longitude of the second point.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_half_up(EARTH_RADIUS_KM * c, 1)
