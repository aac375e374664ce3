"""Current conditions from the OpenWeatherMap ``weather`` endpoint."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from restaurant_signals.datasources.weather.client import (
    CURRENT_WEATHER_API,
    REQUEST_TIMEOUT,
    session,
)
from restaurant_signals.schemas import WeatherObservation

if TYPE_CHECKING:
    import requests


def fetch_current_conditions(
    api_key: str,
    *,
    place: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
    http: requests.Session | None = None,
) -> dict[str, Any]:
    """
    Fetch current weather, by coordinates when both are given, else by place name.

    Args:
        api_key: OpenWeatherMap API key.
        place: City name, e.g. ``"New York"``.
        lat: Latitude.
        lon: Longitude.
        http: Session to use; defaults to the module session.

    Returns:
        Raw API response dict (``main``, ``weather``, ``wind``, ``clouds``, ...).

    Raises:
        requests.HTTPError: If the API answers with a non-2xx status.
        ValueError: If neither coordinates nor a place name are given.
    """
    params: dict[str, str | float] = {"appid": api_key, "units": "metric"}
    if lat is not None and lon is not None:
        params["lat"] = lat
        params["lon"] = lon
    elif place:
        params["q"] = place
    else:
        msg = "Either lat/lon or a place name is required"
        raise ValueError(msg)

    resp = (http or session).get(CURRENT_WEATHER_API, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return result


def to_observation(
    data: dict[str, Any], location: str, observed_at: datetime | None = None
) -> WeatherObservation:
    """Normalize a current-weather response into a :class:`WeatherObservation`."""
    main = data["main"]
    condition = data["weather"][0]
    rain = data.get("rain") or {}
    return WeatherObservation(
        time=observed_at or datetime.now(UTC),
        location=location,
        temperature=main["temp"],
        feels_like=main["feels_like"],
        humidity=main["humidity"],
        pressure=main["pressure"],
        weather_condition=condition["main"],
        weather_description=condition["description"],
        wind_speed=data["wind"]["speed"],
        clouds=data["clouds"]["all"],
        precipitation=rain.get("1h") or 0.0,
        visibility=data.get("visibility"),
    )
