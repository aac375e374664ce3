"""
Local events collector.

Pulls the next week of events around the configured city, scores each by
category and distance from the reference point, and upserts them by event id.
Events that fall out of the window are left in place; nothing is deleted.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from loguru import logger

from restaurant_signals.collectors.base import Collector, is_placeholder_key
from restaurant_signals.datasources.events import client as events_client
from restaurant_signals.datasources.events import discovery
from restaurant_signals.datasources.events.models import EventListing
from restaurant_signals.enrichment.geo import haversine_km
from restaurant_signals.enrichment.impact import impact_score
from restaurant_signals.reference.windows import EVENTS_WINDOW_DAYS
from restaurant_signals.schemas import EventRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from restaurant_signals.store import SignalStore


def _event_label(raw: Any) -> str:
    if isinstance(raw, dict):
        return repr(raw.get("name") or raw.get("id") or "<unnamed>")
    return "<malformed>"


def enrich_event(
    listing: EventListing, reference: tuple[float, float], location: str
) -> EventRecord:
    """Attach distance from ``reference`` and an impact score to a listing."""
    distance = haversine_km(reference[0], reference[1], listing.venue_lat, listing.venue_lon)
    return EventRecord(
        event_id=listing.id,
        event_date=listing.local_date,
        event_time=listing.local_time,
        event_name=listing.name,
        event_type=listing.category,
        venue=listing.venue_name,
        location=location,
        distance_km=distance,
        impact_score=impact_score(listing.category, distance),
    )


class EventsCollector(Collector):
    """Fetch upcoming events near the restaurant and upsert them with impact scores."""

    name = "events"
    label = "Events Collector"
    signup_url = events_client.SIGNUP_URL

    def __init__(
        self,
        store: SignalStore | None,
        api_key: str | None,
        city: str = "New York",
        radius_miles: int = 10,
        reference: tuple[float, float] = (40.7128, -74.0060),
        *,
        window_days: int = EVENTS_WINDOW_DAYS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(store)
        self.api_key = api_key
        self.city = city
        self.radius_miles = radius_miles
        self.reference = reference
        self.window_days = window_days
        self.clock = clock or (lambda: datetime.now(UTC))

    def skip_reason(self) -> str | None:
        if is_placeholder_key(self.api_key, events_client.PLACEHOLDER_API_KEY):
            return "API key not configured"
        return None

    def collect(self) -> int:
        start = self.clock()
        end = start + timedelta(days=self.window_days)
        with events_client.new_session() as http:
            raw_events = discovery.fetch_events(
                self.api_key or "", self.city, self.radius_miles, start, end, http=http
            )
        if not raw_events:
            logger.info(f"[{self.label}] No events found")
            return 0

        def handle(raw: dict[str, Any]) -> None:
            record = enrich_event(EventListing.from_api(raw), self.reference, self.city)
            self.store.upsert_event_record(record)
            logger.debug(
                f"  - {record.event_name} ({record.event_type}) on "
                f"{record.event_date.isoformat()} - Impact: {record.impact_score:.2f}"
            )

        count = self.for_each(raw_events, handle, "event", describe=_event_label)
        logger.info(
            f"[{self.label}] Processed {count}/{len(raw_events)} events "
            f"for next {self.window_days} days"
        )
        return count

    def summary(self, count: int) -> str:
        return f"Upserted {count} events"
