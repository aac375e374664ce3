"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, the provider session
    ├── models.py         # Dataclasses for API responses (optional)
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above.
   See ``weather/`` for a minimal example, ``events/`` for a richer one.

2. Write fetch functions that return dicts or dataclasses::

       from restaurant_signals.datasources.{name}.client import session

       def fetch_something(api_key, lat, lon) -> dict[str, Any]:
           resp = session.get(API_URL, params={...})
           resp.raise_for_status()
           return resp.json()

   Let ``requests`` exceptions propagate; the collector classifies them.

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Wire into the pipeline with a collector (see ``collectors/__init__.py``).

5. Add tests in ``tests/test_{name}.py``.
"""
