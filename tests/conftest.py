"""Shared fixtures: an in-memory fake store and a throwaway SQLite store."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from restaurant_signals.store import SignalStore, StoreError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date
    from pathlib import Path

    from restaurant_signals.schemas import EventRecord, WeatherObservation


class FakeStore:
    """Records writes; can be told to fail for particular keys."""

    def __init__(self) -> None:
        self.weather: list[WeatherObservation] = []
        self.events: list[EventRecord] = []
        self.calendar: list[tuple[date, bool, str | None]] = []
        self.fail_weather = False
        self.fail_event_ids: set[str] = set()
        self.fail_dates: set[date] = set()
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.weather) + len(self.events) + len(self.calendar)

    def insert_weather_observation(self, obs: WeatherObservation) -> None:
        if self.fail_weather:
            msg = "weather insert failed"
            raise StoreError(msg)
        with self._lock:
            self.weather.append(obs)

    def upsert_event_record(self, record: EventRecord) -> None:
        if record.event_id in self.fail_event_ids:
            msg = f"event {record.event_id} failed"
            raise StoreError(msg)
        with self._lock:
            self.events.append(record)

    def upsert_calendar_day(self, day: date, is_holiday: bool, holiday_name: str | None) -> None:
        if day in self.fail_dates:
            msg = f"calendar {day} failed"
            raise StoreError(msg)
        with self._lock:
            self.calendar.append((day, is_holiday, holiday_name))


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Iterator[SignalStore]:
    store = SignalStore(f"sqlite:///{tmp_path / 'signals.db'}")
    store.create_schema()
    yield store
    store.engine.dispose()
