"""OpenWeatherMap API client constants and sessions.

API docs: https://openweathermap.org/current
"""

import requests

from restaurant_signals.services.http import create_session

CURRENT_WEATHER_API = "https://api.openweathermap.org/data/2.5/weather"

# Value shipped in the sample .env; treated the same as no key at all.
PLACEHOLDER_API_KEY = "your_openweathermap_api_key_here"
SIGNUP_URL = "https://openweathermap.org/api"

REQUEST_TIMEOUT = 10  # seconds


def new_session() -> requests.Session:
    """Session for one collector run. Overlapping runs never share one."""
    return create_session(timeout=REQUEST_TIMEOUT)


# Default for direct calls outside a collector (scripts, the REPL).
session = new_session()
