"""Pure enrichment functions (no I/O).

- geo:      great-circle distance between two lat/lon points
- impact:   event impact score from category and distance
- calendar: civil-date facts and holiday resolution
"""

from restaurant_signals.enrichment.calendar import (
    CalendarFacts,
    HolidayResolver,
    StaticHolidayResolver,
    calendar_facts,
    default_holiday_resolver,
)
from restaurant_signals.enrichment.geo import EARTH_RADIUS_KM, haversine_km
from restaurant_signals.enrichment.impact import base_score, distance_decay, impact_score

__all__ = [
    "EARTH_RADIUS_KM",
    "CalendarFacts",
    "HolidayResolver",
    "StaticHolidayResolver",
    "base_score",
    "calendar_facts",
    "default_holiday_resolver",
    "distance_decay",
    "haversine_km",
    "impact_score",
]
