"""Calendar collector: weekday/holiday facts for the forward window."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from loguru import logger

from restaurant_signals.collectors.base import Collector
from restaurant_signals.enrichment.calendar import default_holiday_resolver
from restaurant_signals.reference.windows import CALENDAR_WINDOW_DAYS

if TYPE_CHECKING:
    from collections.abc import Callable

    from restaurant_signals.enrichment.calendar import HolidayResolver
    from restaurant_signals.store import SignalStore


def forward_window(start: date, days: int) -> list[date]:
    """``start`` through ``start + days``, both included."""
    return [start + timedelta(days=i) for i in range(days + 1)]


class CalendarCollector(Collector):
    """Upsert one calendar day per date in the window, flagging holidays.

    The whole window is rewritten on every run; upserts make repeated runs
    converge instead of duplicating rows.
    """

    name = "calendar"
    label = "Calendar Collector"

    def __init__(
        self,
        store: SignalStore | None,
        resolver: HolidayResolver | None = None,
        *,
        window_days: int = CALENDAR_WINDOW_DAYS,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(store)
        self.resolver = resolver or default_holiday_resolver()
        self.window_days = window_days
        self.today = today

    def collect(self) -> int:
        holidays: list[date] = []

        def handle(day: date) -> None:
            name = self.resolver.holiday_name(day)
            self.store.upsert_calendar_day(day, name is not None, name)
            if name is not None:
                holidays.append(day)
                logger.debug(f"  - {day.isoformat()}: {name}")

        days = forward_window(self.today(), self.window_days)
        count = self.for_each(days, handle, "calendar day", describe=date.isoformat)
        logger.info(f"[{self.label}] Processed {count} days ({len(holidays)} holidays)")
        return count

    def summary(self, count: int) -> str:
        return f"Upserted {count} calendar days"
