"""Tests for independent collector triggers and graceful shutdown."""

from __future__ import annotations

import threading
import time as _time
from datetime import UTC, datetime, time, timedelta
from typing import TYPE_CHECKING, Any

import pytest
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from restaurant_signals.collectors.base import Collector
from restaurant_signals.scheduler import DailyAt, Every, Scheduler, SchedulerError
from restaurant_signals.schemas import CollectorOutcome, ErrorKind, OutcomeStatus

if TYPE_CHECKING:
    from collections.abc import Iterator


class StubCollector(Collector):
    """Runs ``action`` as its collect step."""

    requires_store = False

    def __init__(self, name: str, action: Any = None) -> None:
        super().__init__(None)
        self.name = name
        self.label = name.title()
        self.action = action or (lambda: 1)

    def collect(self) -> int:
        result: int = self.action()
        return result


class ExplodingCollector(StubCollector):
    """Breaks the run() contract by raising."""

    def run(self) -> CollectorOutcome:
        raise RuntimeError("contract broken")


def wait_until(predicate: Any, timeout: float = 5.0) -> bool:
    deadline = _time.monotonic() + timeout
    while _time.monotonic() < deadline:
        if predicate():
            return True
        _time.sleep(0.01)
    return False


@pytest.fixture
def scheduler() -> Iterator[Scheduler]:
    s = Scheduler(timezone=UTC)
    yield s
    s.shutdown(grace=1.0)


# =============================================================================
# Triggers
# =============================================================================


class TestEvery:
    def test_builds_interval_trigger(self) -> None:
        trigger = Every.minutes(15).build(UTC)
        assert isinstance(trigger, IntervalTrigger)
        assert trigger.interval == timedelta(minutes=15)

    def test_next_fire_is_one_interval_after_previous(self) -> None:
        trigger = Every.minutes(15).build(UTC)
        previous = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        nxt = trigger.get_next_fire_time(previous, previous)
        assert nxt == datetime(2026, 10, 19, 12, 15, tzinfo=UTC)

    def test_hours(self) -> None:
        assert Every.hours(6).interval == timedelta(hours=6)

    @pytest.mark.parametrize(
        ("trigger", "text"),
        [
            (Every.hours(6), "every 6 hours"),
            (Every.minutes(15), "every 15 minutes"),
            (Every(timedelta(seconds=0.5)), "every 0.5 seconds"),
        ],
    )
    def test_describe(self, trigger: Every, text: str) -> None:
        assert trigger.describe() == text

    @pytest.mark.parametrize("interval", [timedelta(0), timedelta(seconds=-1)])
    def test_rejects_non_positive(self, interval: timedelta) -> None:
        with pytest.raises(ValueError):
            Every(interval)


class TestDailyAt:
    def next_fire(self, at: time, now: datetime) -> datetime | None:
        trigger = DailyAt(at).build(UTC)
        assert isinstance(trigger, CronTrigger)
        result: datetime | None = trigger.get_next_fire_time(None, now)
        return result

    def test_later_today(self) -> None:
        now = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
        assert self.next_fire(time(18, 0), now) == datetime(2026, 10, 19, 18, 0, tzinfo=UTC)

    def test_midnight_rolls_to_tomorrow(self) -> None:
        now = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        assert self.next_fire(time(0, 0), now) == datetime(2026, 10, 20, tzinfo=UTC)

    def test_crosses_month_end(self) -> None:
        now = datetime(2026, 10, 31, 23, 59, tzinfo=UTC)
        assert self.next_fire(time(0, 0), now) == datetime(2026, 11, 1, tzinfo=UTC)

    def test_describe(self) -> None:
        assert DailyAt(time(0, 0)).describe() == "daily at 00:00"



# =============================================================================
# Registration
# =============================================================================


class TestRegistration:
    def test_register(self, scheduler: Scheduler) -> None:
        job = scheduler.register("weather", Every.minutes(15), StubCollector("weather"))
        assert job.name == "weather"
        assert scheduler.get("weather") is job
        assert set(scheduler.jobs) == {"weather"}

    def test_duplicate_name(self, scheduler: Scheduler) -> None:
        scheduler.register("weather", Every.minutes(15), StubCollector("weather"))
        with pytest.raises(SchedulerError, match="already registered"):
            scheduler.register("weather", Every.minutes(5), StubCollector("weather"))

    def test_unknown_job(self, scheduler: Scheduler) -> None:
        with pytest.raises(SchedulerError, match="Unknown job"):
            scheduler.get("nope")

    def test_register_after_shutdown(self, scheduler: Scheduler) -> None:
        scheduler.shutdown(grace=0)
        with pytest.raises(SchedulerError):
            scheduler.register("weather", Every.minutes(15), StubCollector("weather"))

    def test_start_after_shutdown(self, scheduler: Scheduler) -> None:
        scheduler.shutdown(grace=0)
        with pytest.raises(SchedulerError):
            scheduler.start()

    def test_overlap_and_coalesce_options(self) -> None:
        scheduler = Scheduler(max_instances=2, timezone=UTC)
        scheduler.register("events", Every.hours(6), StubCollector("events"))
        scheduler.start()
        try:
            aps_job = scheduler._scheduler.get_job("events")
            assert aps_job.max_instances == 2
            assert aps_job.coalesce is True
        finally:
            scheduler.shutdown(grace=0)

    def test_running_flag(self, scheduler: Scheduler) -> None:
        assert scheduler.running is False
        scheduler.start()
        assert scheduler.running is True
        scheduler.shutdown(grace=0)
        assert scheduler.running is False


# =============================================================================
# Firing
# =============================================================================


class TestFire:
    def test_fire_returns_outcome(self, scheduler: Scheduler) -> None:
        scheduler.register("weather", Every.minutes(15), StubCollector("weather", lambda: 1))

        outcome = scheduler.fire("weather").result(timeout=5)

        assert outcome.status is OutcomeStatus.SUCCESS
        assert outcome.count == 1
        job = scheduler.get("weather")
        assert job.last_outcome == outcome
        assert job.runs == 1
        assert job.in_flight == 0

    def test_failure_is_recorded_not_raised(self, scheduler: Scheduler) -> None:
        def fail() -> int:
            raise ValueError("bad payload")

        scheduler.register("events", Every.hours(6), StubCollector("events", fail))
        outcome = scheduler.fire("events").result(timeout=5)
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.error_kind is ErrorKind.UNEXPECTED

    def test_collector_that_raises_from_run(self, scheduler: Scheduler) -> None:
        scheduler.register("broken", Every.hours(1), ExplodingCollector("broken"))
        outcome = scheduler.fire("broken").result(timeout=5)
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.error_kind is ErrorKind.UNEXPECTED
        assert "contract broken" in (outcome.error or "")

    def test_fire_after_shutdown(self, scheduler: Scheduler) -> None:
        scheduler.register("weather", Every.minutes(15), StubCollector("weather"))
        scheduler.shutdown(grace=0)
        with pytest.raises(SchedulerError):
            scheduler.fire("weather")

    def test_slow_collector_does_not_block_others(self, scheduler: Scheduler) -> None:
        release = threading.Event()

        def slow() -> int:
            release.wait(5)
            return 1

        scheduler.register("events", Every.hours(6), StubCollector("events", slow))
        scheduler.register("weather", Every.minutes(15), StubCollector("weather"))

        slow_future = scheduler.fire("events")
        fast = scheduler.fire("weather").result(timeout=2)

        assert fast.status is OutcomeStatus.SUCCESS
        assert not slow_future.done()
        release.set()
        assert slow_future.result(timeout=5).status is OutcomeStatus.SUCCESS

    def test_overlapping_runs_of_one_job(self, scheduler: Scheduler) -> None:
        release = threading.Event()
        started = threading.Semaphore(0)

        def slow() -> int:
            started.release()
            release.wait(5)
            return 1

        scheduler.register("events", Every.hours(6), StubCollector("events", slow))
        first = scheduler.fire("events")
        second = scheduler.fire("events")
        assert started.acquire(timeout=2)
        assert started.acquire(timeout=2)
        assert scheduler.get("events").in_flight == 2

        release.set()
        assert first.result(timeout=5).ok
        assert second.result(timeout=5).ok
        assert scheduler.get("events").runs == 2

    def test_status_snapshot(self, scheduler: Scheduler) -> None:
        scheduler.register("calendar", DailyAt(time(0, 0)), StubCollector("calendar"))
        scheduler.fire("calendar").result(timeout=5)
        (row,) = scheduler.status()
        assert row["name"] == "calendar"
        assert row["schedule"] == "daily at 00:00"
        assert row["runs"] == 1
        assert row["last_status"] is OutcomeStatus.SUCCESS


class TestTimers:
    def test_interval_fires_repeatedly(self, scheduler: Scheduler) -> None:
        scheduler.register("tick", Every(timedelta(seconds=0.05)), StubCollector("tick"))
        scheduler.start()
        assert wait_until(lambda: scheduler.get("tick").runs >= 3)

    def test_failing_job_keeps_its_schedule(self, scheduler: Scheduler) -> None:
        def fail() -> int:
            raise RuntimeError("down")

        scheduler.register("bad", Every(timedelta(seconds=0.05)), StubCollector("bad", fail))
        scheduler.register("good", Every(timedelta(seconds=0.05)), StubCollector("good"))
        scheduler.start()

        assert wait_until(lambda: scheduler.get("bad").runs >= 2)
        assert wait_until(lambda: scheduler.get("good").runs >= 2)
        assert scheduler.get("good").last_outcome is not None
        assert scheduler.get("good").last_outcome.ok  # type: ignore[union-attr]

    def test_register_while_running_starts_timer(self, scheduler: Scheduler) -> None:
        scheduler.start()
        scheduler.register("late", Every(timedelta(seconds=0.05)), StubCollector("late"))
        assert wait_until(lambda: scheduler.get("late").runs >= 1)

    def test_next_fire_time(self, scheduler: Scheduler) -> None:
        scheduler.register("weather", Every.minutes(15), StubCollector("weather"))
        assert scheduler.next_fire_time("weather") is None

        scheduler.start()
        nxt = scheduler.next_fire_time("weather")
        assert nxt is not None
        assert nxt > datetime.now(UTC)
        assert scheduler.get("weather").runs == 0

    def test_next_fire_time_unknown_job(self, scheduler: Scheduler) -> None:
        with pytest.raises(SchedulerError):
            scheduler.next_fire_time("nope")


# =============================================================================
# Shutdown
# =============================================================================


class TestShutdown:
    def test_drains_in_flight(self) -> None:
        scheduler = Scheduler(timezone=UTC)

        def slowish() -> int:
            _time.sleep(0.2)
            return 1

        scheduler.register("events", Every.hours(6), StubCollector("events", slowish))
        future = scheduler.fire("events")

        assert scheduler.shutdown(grace=5) is True
        assert scheduler.get("events").runs == 1
        assert future.result(timeout=1).ok

    def test_abandons_after_grace(self) -> None:
        scheduler = Scheduler(timezone=UTC)
        release = threading.Event()

        def stuck() -> int:
            release.wait(10)
            return 1

        scheduler.register("events", Every.hours(6), StubCollector("events", stuck))
        future = scheduler.fire("events")
        try:
            assert scheduler.shutdown(grace=0.1) is False
            assert not future.done()
        finally:
            release.set()
        assert future.result(timeout=5).ok

    def test_stops_timers(self) -> None:
        scheduler = Scheduler(timezone=UTC)
        scheduler.register("tick", Every(timedelta(seconds=0.05)), StubCollector("tick"))
        scheduler.start()
        assert wait_until(lambda: scheduler.get("tick").runs >= 1)

        assert scheduler.shutdown(grace=2) is True
        runs = scheduler.get("tick").runs
        _time.sleep(0.2)
        assert scheduler.get("tick").runs == runs

    def test_idle_shutdown(self) -> None:
        assert Scheduler(timezone=UTC).shutdown(grace=0) is True
