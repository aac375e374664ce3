"""
Prefect flows for the collection pipeline.

Flows:
- collect: baseline run of every collector at startup (weather, events, calendar)

Usage (local):
    python -m restaurant_signals.flows.collect

Usage (Prefect dashboard):
    prefect server start &
    python -m restaurant_signals.flows.collect
"""
