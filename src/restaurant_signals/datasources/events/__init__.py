"""Ticketmaster Discovery events data source.

Public API:
  - discovery: fetch_events (raw event dicts for a city/radius/time window)
  - models: EventListing (one parsed event)
  - client: API URL, placeholder key, shared session
"""

from restaurant_signals.datasources.events.client import (
    DISCOVERY_EVENTS_API,
    PLACEHOLDER_API_KEY,
    SIGNUP_URL,
)
from restaurant_signals.datasources.events.discovery import fetch_events, format_datetime
from restaurant_signals.datasources.events.models import EventListing

__all__ = [
    "DISCOVERY_EVENTS_API",
    "PLACEHOLDER_API_KEY",
    "SIGNUP_URL",
    "EventListing",
    "fetch_events",
    "format_datetime",
]
