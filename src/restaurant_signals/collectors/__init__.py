"""Collector jobs: fetch one external source, enrich, persist.

Every collector implements :class:`Collector` and is driven through
``run() -> CollectorOutcome``. ``run()`` never raises, so the scheduler and
the bootstrap sequence treat all collectors alike.

Adding a new collector
----------------------
1. Subclass ``Collector`` in ``collectors/{name}.py``; set ``name``/``label``.
2. Override ``skip_reason()`` if the source needs configuration.
3. Implement ``collect() -> int`` (rows persisted). Let provider and store
   errors propagate; use ``self.for_each()`` for batches so one bad item
   doesn't sink the rest.
4. Build it in ``bootstrap.build_collectors()`` and give it a trigger.
"""

from restaurant_signals.collectors.base import Collector, is_placeholder_key
from restaurant_signals.collectors.calendar import CalendarCollector
from restaurant_signals.collectors.events import EventsCollector
from restaurant_signals.collectors.social import SocialSentimentCollector
from restaurant_signals.collectors.weather import WeatherCollector

__all__ = [
    "CalendarCollector",
    "Collector",
    "EventsCollector",
    "SocialSentimentCollector",
    "WeatherCollector",
    "is_placeholder_key",
]
