"""OpenWeatherMap current-conditions data source.

Public API:
  - current: fetch_current_conditions, to_observation
  - client: API URL, placeholder key, shared session
"""

from restaurant_signals.datasources.weather.client import (
    CURRENT_WEATHER_API,
    PLACEHOLDER_API_KEY,
    SIGNUP_URL,
)
from restaurant_signals.datasources.weather.current import (
    fetch_current_conditions,
    to_observation,
)

__all__ = [
    "CURRENT_WEATHER_API",
    "PLACEHOLDER_API_KEY",
    "SIGNUP_URL",
    "fetch_current_conditions",
    "to_observation",
]
