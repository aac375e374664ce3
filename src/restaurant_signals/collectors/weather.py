"""Current weather collector: one observation per run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from restaurant_signals.collectors.base import Collector, is_placeholder_key
from restaurant_signals.datasources.weather import client as weather_client
from restaurant_signals.datasources.weather import current as weather_current

if TYPE_CHECKING:
    from restaurant_signals.store import SignalStore


class WeatherCollector(Collector):
    """Fetch current conditions for one location and append an observation."""

    name = "weather"
    label = "Weather Collector"
    signup_url = weather_client.SIGNUP_URL

    def __init__(
        self,
        store: SignalStore | None,
        api_key: str | None,
        location: str = "New York",
        lat: float | None = None,
        lon: float | None = None,
    ) -> None:
        super().__init__(store)
        self.api_key = api_key
        self.location = location
        self.lat = lat
        self.lon = lon

    def skip_reason(self) -> str | None:
        if is_placeholder_key(self.api_key, weather_client.PLACEHOLDER_API_KEY):
            return "API key not configured"
        return None

    def collect(self) -> int:
        with weather_client.new_session() as http:
            data = weather_current.fetch_current_conditions(
                self.api_key or "", place=self.location, lat=self.lat, lon=self.lon, http=http
            )
        obs = weather_current.to_observation(data, self.location)
        self.store.insert_weather_observation(obs)
        logger.info(
            f"[{self.label}] {obs.temperature:.1f}°C, {obs.weather_description}, "
            f"humidity {obs.humidity:.0f}%"
        )
        return 1

    def summary(self, count: int) -> str:
        return f"Recorded {count} observation for {self.location}"
