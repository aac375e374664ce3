"""
Calendar facts and holiday lookup.

Facts are derived from the civil date alone. Datetimes are truncated to their
date, so there is no timezone ambiguity. Day of week counts from Sunday = 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Protocol

from restaurant_signals.reference.holidays import US_HOLIDAYS_2025_2026

if TYPE_CHECKING:
    from collections.abc import Mapping

SUNDAY = 0
SATURDAY = 6


@dataclass(frozen=True)
class CalendarFacts:
    """Facts fixed by a date."""

    day_of_week: int
    is_weekend: bool
    month: int
    quarter: int
    year: int


def calendar_facts(day: date | datetime) -> CalendarFacts:
    """Derive weekday, weekend flag, month, quarter and year for a date."""
    if isinstance(day, datetime):
        day = day.date()
    day_of_week = day.isoweekday() % 7
    return CalendarFacts(
        day_of_week=day_of_week,
        is_weekend=day_of_week in (SUNDAY, SATURDAY),
        month=day.month,
        quarter=math.ceil(day.month / 3),
        year=day.year,
    )


class HolidayResolver(Protocol):
    """Anything that can name the holiday on a date."""

    def holiday_name(self, day: date) -> str | None:
        """Return the holiday name, or None for an ordinary day."""
        ...


class StaticHolidayResolver:
    """Holiday lookup over a fixed table keyed by ISO date string."""

    def __init__(self, table: Mapping[str, str]) -> None:
        self._table = dict(table)

    def holiday_name(self, day: date) -> str | None:
        if isinstance(day, datetime):
            day = day.date()
        return self._table.get(day.isoformat())

    def __len__(self) -> int:
        return len(self._table)


def default_holiday_resolver() -> StaticHolidayResolver:
    """US holidays and observances for 2025-2026. Other years have none."""
    return StaticHolidayResolver(US_HOLIDAYS_2025_2026)
