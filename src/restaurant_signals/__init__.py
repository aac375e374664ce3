"""Restaurant Signals - scheduled collection of external demand signals.

Architecture::

    reference/     Static tables (impact scores, decay steps, holidays, windows)
    enrichment/    Pure derivations (haversine distance, impact score, calendar facts)
    datasources/   External APIs (OpenWeatherMap current weather, Ticketmaster events)
    store.py       SQLAlchemy persistence with idempotent upserts
    collectors/    One job per source: fetch -> enrich -> persist, never raises
    scheduler.py   Independent recurring triggers, one per collector
    flows/         Prefect orchestration (baseline collection at startup)
    bootstrap.py   Startup sequence: health check, diagnostics, baseline, schedule
    services/      Shared utilities (HTTP session factory)

Data flow: datasources -> enrichment -> store, driven by collectors on triggers.

Extension points:
  - New data source:   datasources/__init__.py
  - New collector:     collectors/__init__.py
"""

__version__ = "0.1.0"
__author__ = "Michael Howden"

from restaurant_signals.config import Settings
from restaurant_signals.schemas import CollectorOutcome

__all__ = ["CollectorOutcome", "Settings", "__version__"]
