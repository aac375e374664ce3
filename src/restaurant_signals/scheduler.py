"""
Independent recurring triggers for collectors.

A thin layer over APScheduler's ``BackgroundScheduler``. Each registered
collector becomes one APScheduler job with its own trigger (:class:`Every`
N minutes/hours, or :class:`DailyAt` a wall-clock time), run on a shared
thread pool, so:

- a slow or failing collector never delays another collector's trigger;
- a slow run never delays the next tick of the same collector either.
  Up to ``max_instances`` runs of one collector may overlap; collectors upsert
  idempotently and keep per-run state local.

The scheduler only ever sees :class:`CollectorOutcome` values. It records the
last one per job and takes no corrective action (no retry).

Shutdown stops all triggers, then waits up to a grace period for in-flight
runs. Runs still going after that are left to finish on their own.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor as AdHocPool
from dataclasses import dataclass
from datetime import time, timedelta
from typing import TYPE_CHECKING, Any

from apscheduler.events import EVENT_JOB_MAX_INSTANCES, EVENT_JOB_MISSED
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from restaurant_signals.schemas import CollectorOutcome, ErrorKind, OutcomeStatus

if TYPE_CHECKING:
    from concurrent.futures import Future
    from datetime import datetime, tzinfo

    from apscheduler.events import JobEvent
    from apscheduler.triggers.base import BaseTrigger

    from restaurant_signals.collectors.base import Collector

#: Seconds a run may start late (process suspended, pool saturated) and still run.
MISFIRE_GRACE_SECONDS = 60


class SchedulerError(Exception):
    """Invalid scheduler operation (duplicate name, unknown job, use after shutdown)."""


# =============================================================================
# Triggers
# =============================================================================


class Trigger(ABC):
    """Cadence of a job, convertible to an APScheduler trigger."""

    @abstractmethod
    def build(self, timezone: tzinfo) -> BaseTrigger: ...

    @abstractmethod
    def describe(self) -> str: ...


@dataclass(frozen=True)
class Every(Trigger):
    """Fixed interval, counted from registration."""

    interval: timedelta

    def __post_init__(self) -> None:
        if self.interval <= timedelta(0):
            msg = f"Interval must be positive, got {self.interval}"
            raise ValueError(msg)

    @classmethod
    def minutes(cls, n: float) -> Every:
        return cls(timedelta(minutes=n))

    @classmethod
    def hours(cls, n: float) -> Every:
        return cls(timedelta(hours=n))

    def build(self, timezone: tzinfo) -> BaseTrigger:
        return IntervalTrigger(seconds=self.interval.total_seconds(), timezone=timezone)

    def describe(self) -> str:
        seconds = self.interval.total_seconds()
        if seconds % 3600 == 0:
            return f"every {int(seconds // 3600)} hours"
        if seconds % 60 == 0:
            return f"every {int(seconds // 60)} minutes"
        return f"every {seconds:g} seconds"


@dataclass(frozen=True)
class DailyAt(Trigger):
    """Once a day at a fixed wall-clock time in the scheduler's timezone."""

    at: time

    def build(self, timezone: tzinfo) -> BaseTrigger:
        return CronTrigger(
            hour=self.at.hour, minute=self.at.minute, second=self.at.second, timezone=timezone
        )

    def describe(self) -> str:
        return f"daily at {self.at.strftime('%H:%M')}"


# =============================================================================
# Scheduler
# =============================================================================


@dataclass
class ScheduledJob:
    """One collector bound to one trigger."""

    name: str
    trigger: Trigger
    collector: Collector
    last_outcome: CollectorOutcome | None = None
    runs: int = 0
    in_flight: int = 0


class Scheduler:
    """
    Runs each registered collector on its own independent trigger.

    Args:
        max_workers: Threads shared by all scheduled runs.
        max_instances: Overlapping runs allowed per collector. A tick that
            finds this many runs still going is dropped with a warning.
        timezone: Timezone for :class:`DailyAt`. Defaults to the local zone.
    """

    def __init__(
        self, *, max_workers: int = 10, max_instances: int = 3, timezone: Any = None
    ) -> None:
        self._scheduler = BackgroundScheduler(
            executors={"default": ThreadPoolExecutor(max_workers)},
            timezone=timezone,
        )
        self._scheduler.add_listener(self._on_job_event, EVENT_JOB_MISSED | EVENT_JOB_MAX_INSTANCES)
        self._adhoc = AdHocPool(max_workers=max_workers, thread_name_prefix="collector")
        self._max_instances = max_instances
        self._jobs: dict[str, ScheduledJob] = {}
        self._cond = threading.Condition()
        self._in_flight = 0
        self._closed = False

    # -- registration ---------------------------------------------------------

    def register(self, name: str, trigger: Trigger, collector: Collector) -> ScheduledJob:
        """Bind ``collector`` to ``trigger`` under ``name``. Active at once if running."""
        with self._cond:
            if self._closed:
                msg = "Scheduler is shut down"
                raise SchedulerError(msg)
            if name in self._jobs:
                msg = f"Job already registered: {name}"
                raise SchedulerError(msg)
            job = ScheduledJob(name=name, trigger=trigger, collector=collector)
            self._jobs[name] = job
        self._scheduler.add_job(
            self._run_scheduled,
            trigger.build(self._scheduler.timezone),
            args=(job,),
            id=name,
            name=name,
            max_instances=self._max_instances,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        logger.info(f"Collector scheduled: {name} {trigger.describe()}")
        return job

    @property
    def jobs(self) -> dict[str, ScheduledJob]:
        with self._cond:
            return dict(self._jobs)

    def get(self, name: str) -> ScheduledJob:
        with self._cond:
            try:
                return self._jobs[name]
            except KeyError:
                msg = f"Unknown job: {name}"
                raise SchedulerError(msg) from None

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def next_fire_time(self, name: str) -> datetime | None:
        """When ``name`` fires next, or None before start and after shutdown."""
        self.get(name)
        return getattr(self._scheduler.get_job(name), "next_run_time", None)

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> None:
        with self._cond:
            if self._closed:
                msg = "Scheduler is shut down"
                raise SchedulerError(msg)
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self, grace: float = 30.0) -> bool:
        """
        Stop all triggers and drain in-flight runs.

        Args:
            grace: Seconds to wait for running collectors to finish.

        Returns:
            True if every in-flight run finished within the grace period.
        """
        with self._cond:
            self._closed = True
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._adhoc.shutdown(wait=False)

        with self._cond:
            drained = self._cond.wait_for(lambda: self._in_flight == 0, timeout=grace)
            abandoned = [j.name for j in self._jobs.values() if j.in_flight]
        if not drained:
            logger.warning(f"Abandoned {len(abandoned)} in-flight jobs after {grace}s: {abandoned}")
            return False
        logger.info("Scheduler stopped; all in-flight runs completed")
        return True

    # -- firing ---------------------------------------------------------------

    def fire(self, name: str) -> Future[CollectorOutcome]:
        """Run the named job now, outside its trigger."""
        job = self.get(name)
        with self._cond:
            if self._closed:
                msg = "Scheduler is shut down"
                raise SchedulerError(msg)
            self._enter(job)
            return self._adhoc.submit(self._run, job)

    def _run_scheduled(self, job: ScheduledJob) -> None:
        with self._cond:
            # a tick already queued on the pool when shutdown began
            if self._closed:
                return
            self._enter(job)
        logger.info(f"[Scheduled] {job.name} collection triggered")
        self._run(job)

    def _enter(self, job: ScheduledJob) -> None:
        job.in_flight += 1
        self._in_flight += 1

    def _run(self, job: ScheduledJob) -> CollectorOutcome:
        try:
            outcome = job.collector.run()
        except Exception as e:
            # Collector.run() must not raise; record it as a failure if one does.
            logger.exception(f"Collector {job.name} raised out of run()")
            outcome = CollectorOutcome.failed(
                job.name, f"{type(e).__name__}: {e}", ErrorKind.UNEXPECTED, 0.0
            )
        with self._cond:
            job.last_outcome = outcome
            job.runs += 1
            job.in_flight -= 1
            self._in_flight -= 1
            self._cond.notify_all()
        self._log_outcome(job, outcome)
        return outcome

    @staticmethod
    def _log_outcome(job: ScheduledJob, outcome: CollectorOutcome) -> None:
        if outcome.status is OutcomeStatus.FAILED:
            logger.warning(
                f"{job.name}: failed ({outcome.error_kind}) after {outcome.elapsed_ms}ms"
            )
        else:
            logger.debug(f"{job.name}: {outcome.status} ({outcome.count} rows)")

    @staticmethod
    def _on_job_event(event: JobEvent) -> None:
        if event.code == EVENT_JOB_MAX_INSTANCES:
            logger.warning(f"[Scheduled] {event.job_id} skipped: previous runs still in progress")
        else:
            logger.warning(f"[Scheduled] {event.job_id} missed its run time")

    def status(self) -> list[dict[str, Any]]:
        """Snapshot of every job for display."""
        with self._cond:
            jobs = list(self._jobs.values())
        return [
            {
                "name": j.name,
                "schedule": j.trigger.describe(),
                "runs": j.runs,
                "in_flight": j.in_flight,
                "last_status": j.last_outcome.status if j.last_outcome else None,
                "next_fire_at": self.next_fire_time(j.name),
            }
            for j in jobs
        ]
