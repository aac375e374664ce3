"""
Prefect flow for the baseline collection.

Runs each collector once, in order, so the database has data before any
trigger fires. Every collector call is its own task run; collectors never
raise, so one failing source shows up as a failed outcome rather than a
failed flow.

Run locally:
    python -m restaurant_signals.flows.collect
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from restaurant_signals.schemas import CollectorOutcome, OutcomeStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from restaurant_signals.collectors.base import Collector


@task(name="run-collector", task_run_name="collect-{collector.name}", cache_policy=NO_CACHE)
def run_collector(collector: Collector) -> CollectorOutcome:
    """Run one collector and return its outcome."""
    return collector.run()


@flow(name="collect-baseline", log_prints=True, validate_parameters=False)
def collect_baseline(collectors: Sequence[Collector]) -> dict[str, CollectorOutcome]:
    """
    Run every collector once, sequentially, in the given order.

    Returns:
        Outcome per collector name.
    """
    outcomes: dict[str, CollectorOutcome] = {}
    for collector in collectors:
        outcome = run_collector(collector)
        outcomes[collector.name] = outcome
        if outcome.status is OutcomeStatus.SUCCESS:
            print(f"{collector.name}: {outcome.count} rows in {outcome.elapsed_ms:.0f}ms")
        elif outcome.status is OutcomeStatus.SKIPPED:
            print(f"{collector.name}: skipped ({outcome.reason})")
        else:
            print(f"{collector.name}: failed ({outcome.error_kind}: {outcome.error})")
    return outcomes


if __name__ == "__main__":
    from restaurant_signals.bootstrap import build_collectors
    from restaurant_signals.config import get_settings
    from restaurant_signals.store import SignalStore

    settings = get_settings()
    signal_store = SignalStore(settings.database_url)
    signal_store.create_schema()
    collectors = build_collectors(settings, signal_store)
    result = collect_baseline([collectors[n] for n in ("weather", "events", "calendar")])
    print(f"Flow complete: { {k: v.status.value for k, v in result.items()} }")
