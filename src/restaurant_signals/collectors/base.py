"""
Uniform collector contract.

``run()`` wraps ``collect()`` with timing, skip detection and error
classification. Outcomes:

- success: ``collect()`` returned a row count
- skipped: ``skip_reason()`` returned a reason (missing/placeholder API key);
  logged as a warning, not an error
- failed:  no store to write to, before anything is fetched
- failed:  ``collect()`` raised; classified as api / network / request /
  store / unexpected and logged

There is no retry here. A failed run waits for its next tick.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

import requests
from loguru import logger

from restaurant_signals.schemas import CollectorOutcome, ErrorKind
from restaurant_signals.store import StoreError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from restaurant_signals.store import SignalStore

T = TypeVar("T")


def is_placeholder_key(api_key: str | None, placeholder: str) -> bool:
    """True if the key is absent, blank or the sample-config placeholder."""
    return not api_key or not api_key.strip() or api_key.strip() == placeholder


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


class Collector(ABC):
    """One external data source: fetch -> enrich -> persist."""

    #: Short identifier used by the scheduler and CLI.
    name: str = "collector"
    #: Prefix for log lines, e.g. ``[Weather Collector]``.
    label: str = "Collector"
    #: Where to get credentials, shown when the collector will skip.
    signup_url: str | None = None
    #: False for collectors that never write (the social stub).
    requires_store: bool = True

    def __init__(self, store: SignalStore | None = None) -> None:
        self.store = store

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def skip_reason(self) -> str | None:
        """Reason this collector cannot run with its configuration, or None."""
        return None

    def is_configured(self) -> bool:
        return self.skip_reason() is None

    @abstractmethod
    def collect(self) -> int:
        """Fetch, enrich and persist. Returns the number of rows written."""

    def run(self) -> CollectorOutcome:
        """Run once and report the outcome. Never raises."""
        started = time.perf_counter()
        logger.info(f"[{self.label}] Starting collection...")

        reason = self.skip_reason()
        if reason is not None:
            logger.warning(f"[{self.label}] {reason}. Skipping collection.")
            return CollectorOutcome.skipped(self.name, reason, _elapsed_ms(started))

        if self.requires_store and self.store is None:
            elapsed = _elapsed_ms(started)
            logger.error(f"[{self.label}] No store configured. Cannot persist results.")
            return CollectorOutcome.failed(
                self.name, "no store configured", ErrorKind.STORE, elapsed
            )

        try:
            count = self.collect()
        except requests.HTTPError as e:
            elapsed = _elapsed_ms(started)
            status = e.response.status_code if e.response is not None else None
            body = e.response.text[:500] if e.response is not None else ""
            logger.error(f"[{self.label}] API Error ({elapsed}ms): {status} {body}")
            return CollectorOutcome.failed(self.name, f"HTTP {status}", ErrorKind.API, elapsed)
        except (requests.ConnectionError, requests.Timeout) as e:
            elapsed = _elapsed_ms(started)
            logger.error(f"[{self.label}] Network Error ({elapsed}ms): No response received ({e})")
            return CollectorOutcome.failed(self.name, str(e), ErrorKind.NETWORK, elapsed)
        except requests.RequestException as e:
            elapsed = _elapsed_ms(started)
            logger.error(f"[{self.label}] Request Error ({elapsed}ms): {e}")
            return CollectorOutcome.failed(self.name, str(e), ErrorKind.REQUEST, elapsed)
        except StoreError as e:
            elapsed = _elapsed_ms(started)
            logger.error(f"[{self.label}] Store Error ({elapsed}ms): {e}")
            return CollectorOutcome.failed(self.name, str(e), ErrorKind.STORE, elapsed)
        except Exception as e:
            elapsed = _elapsed_ms(started)
            logger.exception(f"[{self.label}] Unexpected Error ({elapsed}ms)")
            return CollectorOutcome.failed(
                self.name, f"{type(e).__name__}: {e}", ErrorKind.UNEXPECTED, elapsed
            )

        elapsed = _elapsed_ms(started)
        logger.info(f"[{self.label}] Success ({elapsed}ms): {self.summary(count)}")
        return CollectorOutcome.success(self.name, count, elapsed)

    def summary(self, count: int) -> str:
        """One-line description of a successful run for the log."""
        return f"Persisted {count} rows"

    def for_each(
        self,
        items: Iterable[T],
        handle: Callable[[T], object],
        what: str,
        describe: Callable[[T], str] | None = None,
    ) -> int:
        """
        Apply ``handle`` to each item in order, dropping items that fail.

        Args:
            items: Batch to process.
            handle: Enrich-and-persist step for one item.
            what: Noun for log lines (``"event"``, ``"calendar day"``).
            describe: Optional label for a failed item (e.g. its name).

        Returns:
            Number of items handled without error.
        """
        done = 0
        for item in items:
            try:
                handle(item)
            except Exception as e:
                label = f" {describe(item)}" if describe is not None else ""
                logger.warning(
                    f"[{self.label}] Failed to process {what}{label}: {type(e).__name__}: {e}"
                )
                continue
            done += 1
        return done
