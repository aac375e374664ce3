"""Windowed event search on the Discovery ``events`` endpoint."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from restaurant_signals.datasources.events.client import (
    DISCOVERY_EVENTS_API,
    PAGE_SIZE,
    REQUEST_TIMEOUT,
    session,
)

if TYPE_CHECKING:
    import requests


def format_datetime(dt: datetime) -> str:
    """Discovery wants UTC with second precision: ``2026-02-04T18:00:00Z``."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def fetch_events(
    api_key: str,
    city: str,
    radius_miles: int,
    start: datetime,
    end: datetime,
    *,
    size: int = PAGE_SIZE,
    http: requests.Session | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch events in ``city`` between ``start`` and ``end``.

    Args:
        api_key: Ticketmaster consumer key.
        city: City name to search.
        radius_miles: Search radius around the city.
        start: Window start.
        end: Window end.
        size: Page size.
        http: Session to use; defaults to the module session.

    Returns:
        Raw event dicts, in API order. Empty when nothing matched.

    Raises:
        requests.HTTPError: If the API answers with a non-2xx status.
    """
    params: dict[str, str | int] = {
        "city": city,
        "radius": radius_miles,
        "unit": "miles",
        "startDateTime": format_datetime(start),
        "endDateTime": format_datetime(end),
        "size": size,
        "apikey": api_key,
    }
    resp = (http or session).get(DISCOVERY_EVENTS_API, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    data: dict[str, Any] = resp.json()
    events: list[dict[str, Any]] = (data.get("_embedded") or {}).get("events", [])
    return events
