"""
Service startup and shutdown.

Startup order:
  1. Store health check. The only fatal error: without a database nothing a
     collector does is durable, so :class:`StartupError` is raised.
  2. Create missing tables.
  3. Report which collectors are configured and which will skip.
  4. Baseline: run weather, events, calendar once, in that order (Prefect flow).
  5. Register one trigger per collector and start the scheduler.

:meth:`CollectionService.wait` then blocks until SIGINT/SIGTERM, drains the
scheduler and closes the store.
"""

from __future__ import annotations

import signal
import threading
from typing import TYPE_CHECKING, Any

from loguru import logger

from restaurant_signals.collectors import (
    CalendarCollector,
    EventsCollector,
    SocialSentimentCollector,
    WeatherCollector,
)
from restaurant_signals.enrichment.calendar import default_holiday_resolver
from restaurant_signals.flows.collect import collect_baseline
from restaurant_signals.scheduler import DailyAt, Every, Scheduler
from restaurant_signals.store import SignalStore, StoreError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from restaurant_signals.collectors.base import Collector
    from restaurant_signals.config import Settings
    from restaurant_signals.scheduler import Trigger
    from restaurant_signals.schemas import CollectorOutcome

#: Collectors run once at startup, in this order. The social stub is scheduled only.
BASELINE_ORDER = ("weather", "events", "calendar")


class StartupError(Exception):
    """The service cannot start (database unreachable)."""


def build_collectors(settings: Settings, store: SignalStore | None) -> dict[str, Collector]:
    """Every collector, wired to ``store`` and the resolved settings."""
    return {
        "weather": WeatherCollector(
            store,
            api_key=settings.weather_api_key,
            location=settings.weather_location,
            lat=settings.weather_lat,
            lon=settings.weather_lon,
        ),
        "events": EventsCollector(
            store,
            api_key=settings.events_api_key,
            city=settings.events_city,
            radius_miles=settings.events_radius_miles,
            reference=settings.reference_point,
        ),
        "calendar": CalendarCollector(store, default_holiday_resolver()),
        "social": SocialSentimentCollector(store),
    }


def build_triggers(settings: Settings) -> dict[str, Trigger]:
    """Cadence per collector name."""
    return {
        "weather": Every.minutes(settings.weather_interval_minutes),
        "events": Every.hours(settings.events_interval_hours),
        "calendar": DailyAt(settings.calendar_run_at),
        "social": Every.hours(settings.social_interval_hours),
    }


def report_configuration(collectors: dict[str, Collector]) -> dict[str, bool]:
    """Log which collectors will run and which will skip. Returns name -> configured."""
    configured: dict[str, bool] = {}
    for name, collector in collectors.items():
        reason = collector.skip_reason()
        configured[name] = reason is None
        if reason is None:
            logger.info(f"  {collector.label}: configured")
            continue
        logger.warning(f"  {collector.label}: {reason}, will skip")
        if collector.signup_url:
            logger.warning(f"    Get a free key at: {collector.signup_url}")
    return configured


class CollectionService:
    """Owns the store, the collectors and the scheduler for the process lifetime."""

    def __init__(
        self,
        settings: Settings,
        store: SignalStore | None = None,
        *,
        scheduler: Scheduler | None = None,
        baseline: Callable[[Sequence[Collector]], dict[str, CollectorOutcome]] | None = None,
    ) -> None:
        self.settings = settings
        if store is None:
            try:
                store = SignalStore(settings.database_url)
            except StoreError as e:
                logger.error(f"Fatal error during startup: {e}")
                raise StartupError(str(e)) from e
        self.store = store
        self.scheduler = scheduler or Scheduler()
        self.collectors = build_collectors(settings, self.store)
        self._baseline = baseline or collect_baseline
        self._stop_requested = threading.Event()
        self._stopped = False

    def start(self) -> dict[str, CollectorOutcome]:
        """
        Run the startup sequence and start the scheduler.

        Returns:
            Baseline outcome per collector name.

        Raises:
            StartupError: If the database is unreachable. The store is closed first.
        """
        logger.info(f"{self.settings.app_name} - Data Collection Service")
        logger.info("Initializing database connection...")
        try:
            self.store.health_check()
            self.store.create_schema()
        except StoreError as e:
            logger.error(f"Fatal error during startup: {e}")
            self.store.close()
            raise StartupError(str(e)) from e

        logger.info("Collector configuration:")
        report_configuration(self.collectors)

        logger.info("Running initial data collection...")
        outcomes = self._baseline([self.collectors[name] for name in BASELINE_ORDER])

        logger.info("Setting up scheduled collections...")
        for name, trigger in build_triggers(self.settings).items():
            self.scheduler.register(name, trigger, self.collectors[name])
        self.scheduler.start()

        logger.info("Data Collection Service is running. Press Ctrl+C to stop.")
        return outcomes

    def request_stop(self, signum: int | None = None, _frame: Any = None) -> None:
        if signum is not None:
            logger.info(f"{signal.Signals(signum).name} received. Shutting down gracefully...")
        self._stop_requested.set()

    def wait(self) -> None:
        """Block until SIGINT/SIGTERM (or :meth:`request_stop`), then stop."""
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGINT, self.request_stop)
            signal.signal(signal.SIGTERM, self.request_stop)
        self._stop_requested.wait()
        self.stop()

    def stop(self) -> bool:
        """Drain the scheduler, then close the store. Safe to call twice."""
        if self._stopped:
            return True
        self._stopped = True
        drained = self.scheduler.shutdown(grace=self.settings.shutdown_grace_seconds)
        self.store.close()
        return drained
