"""Static reference data.

Tables that don't change with API calls: event category weights, distance
decay steps, collection windows, the holiday calendar.

Adding a new module:
1. Create ``reference/{name}.py`` with constants/dataclasses
2. Re-export from this ``__init__.py``
"""

from restaurant_signals.reference.holidays import US_HOLIDAYS_2025_2026 as US_HOLIDAYS_2025_2026
from restaurant_signals.reference.impact import CATEGORY_BASE_SCORES as CATEGORY_BASE_SCORES
from restaurant_signals.reference.impact import DISTANCE_DECAY_STEPS as DISTANCE_DECAY_STEPS
from restaurant_signals.reference.impact import FAR_DECAY as FAR_DECAY
from restaurant_signals.reference.impact import UNKNOWN_CATEGORY as UNKNOWN_CATEGORY
from restaurant_signals.reference.windows import CALENDAR_WINDOW_DAYS as CALENDAR_WINDOW_DAYS
from restaurant_signals.reference.windows import EVENTS_WINDOW_DAYS as EVENTS_WINDOW_DAYS
