"""Configuration settings loaded from the environment and ``.env``.

Everything here is resolved once and handed to the collectors and scheduler as
plain values; nothing downstream reads the environment itself.
"""

from __future__ import annotations

from datetime import time
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Restaurant Signals"
    app_env: str = "development"
    debug: bool = False
    database_url: str = "sqlite:///restaurant_signals.db"

    # Weather provider (OpenWeatherMap)
    weather_api_key: str = ""
    weather_location: str = "New York"
    weather_lat: float | None = None
    weather_lon: float | None = None
    weather_interval_minutes: int = Field(default=15, gt=0)

    # Events provider (Ticketmaster Discovery)
    events_api_key: str = ""
    events_city: str = "New York"
    events_radius_miles: int = Field(default=10, gt=0)
    events_interval_hours: int = Field(default=6, gt=0)

    # Reference point for event distances; falls back to the weather coordinates
    restaurant_lat: float | None = None
    restaurant_lon: float | None = None

    calendar_run_at: time = time(0, 0)
    social_interval_hours: int = Field(default=24, gt=0)

    log_level: str = "INFO"
    log_dir: str = "logs"
    shutdown_grace_seconds: float = Field(default=30.0, ge=0)

    @property
    def reference_point(self) -> tuple[float, float]:
        """(lat, lon) that event distances are measured from."""
        lat = self.restaurant_lat if self.restaurant_lat is not None else self.weather_lat
        lon = self.restaurant_lon if self.restaurant_lon is not None else self.weather_lon
        return (
            lat if lat is not None else 40.7128,
            lon if lon is not None else -74.0060,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
