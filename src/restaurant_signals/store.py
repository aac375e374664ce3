"""Relational store for collected signals.

Three tables, one per record type:
  - weather:  append-only time series of current conditions
  - events:   upsert on ``event_id``; date/time/impact/attendance refresh,
              name/venue/category keep their first-seen values
  - calendar: upsert on ``date``; only the holiday fields refresh

Upserts use the dialect's native ``INSERT ... ON CONFLICT DO UPDATE``
(PostgreSQL in production, SQLite for tests and local runs). Each call runs in
its own short transaction on the engine's connection pool, so collectors on
different threads can share one store.

Failures raise :class:`StoreError`.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from loguru import logger
from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    create_engine,
    func,
    select,
    text,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from restaurant_signals.schemas import CalendarDay, EventRecord, WeatherObservation

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class StoreError(Exception):
    """A store operation failed."""


# =============================================================================
# Tables
# =============================================================================


class Base(DeclarativeBase):
    pass


class WeatherRow(Base):
    __tablename__ = "weather"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    time: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    location: Mapped[str] = mapped_column(String(200))
    temperature: Mapped[float] = mapped_column(Float)
    feels_like: Mapped[float] = mapped_column(Float)
    humidity: Mapped[float] = mapped_column(Float)
    pressure: Mapped[float] = mapped_column(Float)
    weather_condition: Mapped[str] = mapped_column(String(100))
    weather_description: Mapped[str] = mapped_column(Text)
    wind_speed: Mapped[float] = mapped_column(Float)
    clouds: Mapped[float] = mapped_column(Float)
    precipitation: Mapped[float | None] = mapped_column(Float, nullable=True)
    visibility: Mapped[float | None] = mapped_column(Float, nullable=True)


class EventRow(Base):
    __tablename__ = "events"

    event_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    event_date: Mapped[date] = mapped_column(Date, index=True)
    event_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    event_name: Mapped[str] = mapped_column(Text)
    event_type: Mapped[str] = mapped_column(String(100))
    venue: Mapped[str] = mapped_column(Text)
    location: Mapped[str] = mapped_column(String(200))
    distance_km: Mapped[float] = mapped_column(Float)
    impact_score: Mapped[float] = mapped_column(Float)
    expected_attendance: Mapped[int | None] = mapped_column(Integer, nullable=True)


class CalendarRow(Base):
    __tablename__ = "calendar"

    day: Mapped[date] = mapped_column("date", Date, primary_key=True)
    day_of_week: Mapped[int] = mapped_column(Integer)
    is_weekend: Mapped[bool] = mapped_column(Boolean)
    is_holiday: Mapped[bool] = mapped_column(Boolean)
    holiday_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    month: Mapped[int] = mapped_column(Integer)
    quarter: Mapped[int] = mapped_column(Integer)
    year: Mapped[int] = mapped_column(Integer)


# Columns refreshed when an upsert hits an existing row.
EVENT_MUTABLE_COLUMNS = ("event_date", "event_time", "impact_score", "expected_attendance")
CALENDAR_MUTABLE_COLUMNS = ("is_holiday", "holiday_name")


# =============================================================================
# Store
# =============================================================================


def create_store_engine(url: str) -> Engine:
    """Engine for ``url``; SQLite gets settings that allow use from several threads."""
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class SignalStore:
    """Persists weather observations, event records and calendar days."""

    def __init__(self, url: str | None = None, *, engine: Engine | None = None) -> None:
        if engine is None:
            if url is None:
                msg = "SignalStore needs a database URL or an engine"
                raise ValueError(msg)
            try:
                engine = create_store_engine(url)
            except (SQLAlchemyError, ImportError) as e:
                # bad URL, unknown dialect, or a DBAPI driver that is not installed
                msg = f"Cannot create database engine: {e}"
                raise StoreError(msg) from e
        self.engine = engine

    def __repr__(self) -> str:
        return f"SignalStore({self.engine.url.render_as_string(hide_password=True)})"

    # -- lifecycle ------------------------------------------------------------

    def health_check(self) -> None:
        """Round-trip a trivial query. Raises StoreError if the database is unreachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            msg = f"Database unreachable: {e}"
            raise StoreError(msg) from e
        logger.info("Database connection established")

    def create_schema(self) -> None:
        """Create missing tables."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            msg = f"Schema creation failed: {e}"
            raise StoreError(msg) from e

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connection closed")

    # -- writes ---------------------------------------------------------------

    def insert_weather_observation(self, obs: WeatherObservation) -> None:
        """Append one observation."""
        self._execute(
            self._insert(WeatherRow).values(**obs.model_dump()),
            f"insert weather observation for {obs.location}",
        )
        logger.debug("Weather observation inserted")

    def upsert_event_record(self, record: EventRecord) -> None:
        """Insert an event, or refresh its date/time/impact/attendance if known."""
        stmt = self._insert(EventRow).values(**record.model_dump())
        stmt = stmt.on_conflict_do_update(
            index_elements=["event_id"],
            set_={col: stmt.excluded[col] for col in EVENT_MUTABLE_COLUMNS},
        )
        self._execute(stmt, f"upsert event {record.event_id}")
        logger.debug(f"Event upserted: {record.event_name}")

    def upsert_calendar_day(
        self, day: date, is_holiday: bool, holiday_name: str | None
    ) -> CalendarDay:
        """Insert a calendar day, or refresh its holiday fields if known.

        The weekday, weekend, month, quarter and year columns are derived from
        ``day`` and never change once written.
        """
        holiday = holiday_name if is_holiday else None
        cal = CalendarDay.for_date(day, holiday)
        values = cal.model_dump()
        values["date"] = values.pop("day")
        stmt = self._insert(CalendarRow).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["date"],
            set_={col: stmt.excluded[col] for col in CALENDAR_MUTABLE_COLUMNS},
        )
        self._execute(stmt, f"upsert calendar day {cal.day.isoformat()}")
        logger.debug(f"Calendar day upserted for {cal.day.isoformat()}")
        return cal

    # -- reads ----------------------------------------------------------------

    def get_event(self, event_id: str) -> EventRecord | None:
        row = self._scalar(select(EventRow).where(EventRow.event_id == event_id))
        if row is None:
            return None
        return EventRecord(
            event_id=row.event_id,
            event_date=row.event_date,
            event_time=row.event_time,
            event_name=row.event_name,
            event_type=row.event_type,
            venue=row.venue,
            location=row.location,
            distance_km=row.distance_km,
            impact_score=row.impact_score,
            expected_attendance=row.expected_attendance,
        )

    def get_calendar_day(self, day: date) -> CalendarDay | None:
        row = self._scalar(select(CalendarRow).where(CalendarRow.day == day))
        if row is None:
            return None
        return CalendarDay(
            day=row.day,
            day_of_week=row.day_of_week,
            is_weekend=row.is_weekend,
            is_holiday=row.is_holiday,
            holiday_name=row.holiday_name,
            month=row.month,
            quarter=row.quarter,
            year=row.year,
        )

    def latest_weather(self) -> WeatherObservation | None:
        row = self._scalar(select(WeatherRow).order_by(WeatherRow.time.desc()).limit(1))
        if row is None:
            return None
        return WeatherObservation(
            time=row.time,
            location=row.location,
            temperature=row.temperature,
            feels_like=row.feels_like,
            humidity=row.humidity,
            pressure=row.pressure,
            weather_condition=row.weather_condition,
            weather_description=row.weather_description,
            wind_speed=row.wind_speed,
            clouds=row.clouds,
            precipitation=row.precipitation or 0.0,
            visibility=row.visibility,
        )

    def count_weather(self) -> int:
        return self._count(WeatherRow)

    def count_events(self) -> int:
        return self._count(EventRow)

    def count_calendar_days(self) -> int:
        return self._count(CalendarRow)

    # -- internals ------------------------------------------------------------

    def _insert(self, table: type[Base]) -> Any:
        """Dialect-specific INSERT supporting ``on_conflict_do_update``."""
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        msg = f"Unsupported database dialect: {dialect}"
        raise StoreError(msg)

    def _execute(self, stmt: Any, what: str) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            msg = f"Failed to {what}: {e}"
            raise StoreError(msg) from e

    def _scalar(self, stmt: Any) -> Any:
        try:
            with Session(self.engine) as session:
                return session.scalars(stmt).first()
        except SQLAlchemyError as e:
            msg = f"Query failed: {e}"
            raise StoreError(msg) from e

    def _count(self, table: type[Base]) -> int:
        try:
            with Session(self.engine) as session:
                return int(session.scalar(select(func.count()).select_from(table)) or 0)
        except SQLAlchemyError as e:
            msg = f"Count failed: {e}"
            raise StoreError(msg) from e
