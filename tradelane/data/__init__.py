"""Waypoint weather models and provider."""

from .weather_models import (
    OceanSnapshot,
    WaypointWeather,
    WeatherSnapshot,
    coerce_waypoint_weather,
    parse_number,
)
from .weather_client import (
    OpenWeatherClient,
    SyntheticWeatherGenerator,
    WeatherProviderError,
    WeatherService,
    derive_ocean_snapshot,
    weather_icon,
)

__all__ = [
    "OceanSnapshot",
    "WaypointWeather",
    "WeatherSnapshot",
    "coerce_waypoint_weather",
    "parse_number",
    "OpenWeatherClient",
    "SyntheticWeatherGenerator",
    "WeatherProviderError",
    "WeatherService",
    "derive_ocean_snapshot",
    "weather_icon",
]
