"""
Event impact scoring.

Impact estimates how much an event will move restaurant traffic::

    impact = base(category) * decay(distance)

Both factors come from ``reference.impact``. The result is rounded to two
decimals and depends only on its inputs, so recomputing it is idempotent.
"""

from __future__ import annotations

from restaurant_signals.enrichment.rounding import round_half_up
from restaurant_signals.reference.impact import (
    CATEGORY_BASE_SCORES,
    DISTANCE_DECAY_STEPS,
    FAR_DECAY,
    UNKNOWN_CATEGORY,
)


def base_score(category: str | None) -> float:
    """Base impact for an event category; unrecognised categories score as Unknown."""
    if category is None:
        return CATEGORY_BASE_SCORES[UNKNOWN_CATEGORY]
    return CATEGORY_BASE_SCORES.get(category, CATEGORY_BASE_SCORES[UNKNOWN_CATEGORY])


def distance_decay(distance_km: float) -> float:
    """Step decay factor: closer events weigh more."""
    for bound, factor in DISTANCE_DECAY_STEPS:
        if distance_km <= bound:
            return factor
    return FAR_DECAY


def impact_score(category: str | None, distance_km: float) -> float:
    """
    Impact of an event on the reference location.

    Args:
        category: Event category (Ticketmaster segment name).
        distance_km: Distance from the reference point.

    Returns:
        Score in [0, 1], two decimals.
    """
    return round_half_up(base_score(category) * distance_decay(distance_km), 2)
