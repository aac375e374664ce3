"""
Domain models for restaurant signals.

Pydantic models for collected records and collector outcomes.
These define the canonical schema - datasources are normalized to these
before they reach the store.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from restaurant_signals.enrichment.calendar import calendar_facts

# =============================================================================
# Collected records
# =============================================================================


class WeatherObservation(BaseModel):
    """Current conditions at one location. Append-only time series."""

    model_config = {"frozen": True, "str_strip_whitespace": True}

    time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    location: str
    temperature: float = Field(..., description="Degrees Celsius")
    feels_like: float = Field(..., description="Degrees Celsius")
    humidity: float = Field(..., ge=0, le=100)
    pressure: float = Field(..., description="hPa")
    weather_condition: str
    weather_description: str
    wind_speed: float
    clouds: float = Field(..., ge=0, le=100)
    precipitation: float = Field(default=0.0, ge=0)
    visibility: float | None = Field(default=None, description="Metres")


class EventRecord(BaseModel):
    """A local event, enriched with distance and impact. Identity is ``event_id``."""

    model_config = {"frozen": True, "str_strip_whitespace": True}

    event_id: str = Field(..., min_length=1)
    event_date: date
    event_time: str | None = None
    event_name: str
    event_type: str
    venue: str
    location: str
    distance_km: float = Field(..., ge=0)
    impact_score: float = Field(..., ge=0, le=1)
    expected_attendance: int | None = None


class CalendarDay(BaseModel):
    """Calendar facts for one date. Identity is ``day``.

    Build with :meth:`for_date`; the weekday, weekend, month, quarter and year
    fields must agree with the date and are rejected otherwise.
    """

    model_config = {"frozen": True}

    day: date = Field(..., description="Calendar date (identity)")
    day_of_week: int = Field(..., ge=0, le=6)
    is_weekend: bool
    is_holiday: bool = False
    holiday_name: str | None = None
    month: int = Field(..., ge=1, le=12)
    quarter: int = Field(..., ge=1, le=4)
    year: int

    @classmethod
    def for_date(cls, day: date | datetime, holiday_name: str | None = None) -> CalendarDay:
        """Derive every fixed fact from ``day``."""
        if isinstance(day, datetime):
            day = day.date()
        facts = calendar_facts(day)
        return cls(
            day=day,
            day_of_week=facts.day_of_week,
            is_weekend=facts.is_weekend,
            is_holiday=holiday_name is not None,
            holiday_name=holiday_name,
            month=facts.month,
            quarter=facts.quarter,
            year=facts.year,
        )

    @model_validator(mode="after")
    def _facts_match_date(self) -> CalendarDay:
        facts = calendar_facts(self.day)
        derived = (facts.day_of_week, facts.is_weekend, facts.month, facts.quarter, facts.year)
        given = (self.day_of_week, self.is_weekend, self.month, self.quarter, self.year)
        if derived != given:
            msg = f"Calendar facts do not match {self.day.isoformat()}"
            raise ValueError(msg)
        if self.is_holiday != (self.holiday_name is not None):
            msg = "is_holiday must be set exactly when holiday_name is"
            raise ValueError(msg)
        return self


# =============================================================================
# Collector outcomes
# =============================================================================


class OutcomeStatus(StrEnum):
    """Terminal state of one collector invocation."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ErrorKind(StrEnum):
    """Classification of a failed run."""

    API = "api"  # provider answered with a non-2xx status
    NETWORK = "network"  # no response received
    REQUEST = "request"  # request could not be sent
    STORE = "store"
    UNEXPECTED = "unexpected"


class CollectorOutcome(BaseModel):
    """Result of ``Collector.run()``: success, skipped or failed."""

    model_config = {"frozen": True}

    collector: str
    status: OutcomeStatus
    count: int = 0
    elapsed_ms: float = 0.0
    reason: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def success(cls, collector: str, count: int, elapsed_ms: float) -> CollectorOutcome:
        return cls(
            collector=collector, status=OutcomeStatus.SUCCESS, count=count, elapsed_ms=elapsed_ms
        )

    @classmethod
    def skipped(cls, collector: str, reason: str, elapsed_ms: float = 0.0) -> CollectorOutcome:
        return cls(
            collector=collector, status=OutcomeStatus.SKIPPED, reason=reason, elapsed_ms=elapsed_ms
        )

    @classmethod
    def failed(
        cls, collector: str, error: str, kind: ErrorKind, elapsed_ms: float
    ) -> CollectorOutcome:
        return cls(
            collector=collector,
            status=OutcomeStatus.FAILED,
            error=error,
            error_kind=kind,
            elapsed_ms=elapsed_ms,
        )

    @property
    def ok(self) -> bool:
        """True unless the run failed. Skips are not errors."""
        return self.status is not OutcomeStatus.FAILED
