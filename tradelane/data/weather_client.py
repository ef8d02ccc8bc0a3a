"""
Waypoint weather provider.

Live atmospheric data comes from the OpenWeatherMap current-weather
endpoint. OpenWeatherMap carries no marine fields, so sea state and
current are simulated from the wind at the same point. When the
provider is unconfigured, failing, or its circuit is open, a
synthetic generator takes over, so ``fetch_waypoint_weather`` always
returns populated weather and ocean snapshots.
"""

import asyncio
import json
import logging
import math
import threading
import urllib.parse
import urllib.request
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np

from tradelane.config import Settings
from tradelane.data.weather_models import (
    Coordinate,
    OceanSnapshot,
    WaypointWeather,
    WeatherSnapshot,
)
from tradelane.resilience import (
    CircuitBreaker,
    CircuitOpenError,
    register_circuit_breaker,
    with_retry,
)
from tradelane.validation import validate_coordinates

logger = logging.getLogger(__name__)

USER_AGENT = "Tradelane/1.0"

WEATHER_ICONS = {
    "01": "☀️",  # clear sky
    "02": "⛅",  # few clouds
    "03": "☁️",  # scattered clouds
    "04": "☁️",  # broken clouds
    "09": "🌧️",  # shower rain
    "10": "🌦️",  # rain
    "11": "⛈️",  # thunderstorm
    "13": "🌨️",  # snow
    "50": "🌫️",  # mist
}
DEFAULT_WEATHER_ICON = "🌤️"


class WeatherProviderError(Exception):
    """The live provider returned an unusable response."""
    pass


def weather_icon(code: Any) -> str:
    """Emoji for an OpenWeatherMap icon code such as ``"10d"``."""
    if code is None:
        return DEFAULT_WEATHER_ICON
    return WEATHER_ICONS.get(str(code)[:2], DEFAULT_WEATHER_ICON)


def derive_ocean_snapshot(weather: WeatherSnapshot, rng: np.random.Generator) -> OceanSnapshot:
    """
    Simulate sea state and current from the local wind.

    Wave height grows with wind speed; swell follows the wind within
    ±30°; current speed and set are independent of the wind.
    """
    wave = max(0.3, weather.wind_speed_ms * 0.2 + rng.uniform(0.0, 0.5))
    swell = max(0.2, wave * 0.6 + rng.uniform(0.0, 0.3))
    swell_dir = math.floor((weather.wind_dir_deg + rng.uniform(-30.0, 30.0)) % 360)
    current_speed = 0.5 + rng.uniform(0.0, 1.5)
    current_dir = math.floor(rng.uniform(0.0, 360.0))
    water_temp = weather.temperature_c + rng.uniform(-1.0, 1.0)

    visibility = 10.0
    if weather.condition == "Rain":
        visibility = 5.0 + rng.uniform(0.0, 3.0)
    elif weather.condition == "Fog":
        visibility = 1.0 + rng.uniform(0.0, 2.0)

    return OceanSnapshot(
        wave_height_m=float(wave),
        swell_height_m=float(swell),
        swell_dir_deg=float(swell_dir),
        current_speed_kts=float(current_speed),
        current_dir_deg=float(current_dir),
        water_temp_c=float(water_temp),
        visibility_km=float(visibility),
    )


class SyntheticWeatherGenerator:
    """
    Generates plausible waypoint weather for development and fallback.

    Seeded generators are reproducible. All draws for one waypoint are
    taken under one lock acquisition, so concurrent fetches never mix
    the draws of two waypoints.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._lock = threading.RLock()

    def weather(self) -> WeatherSnapshot:
        with self._lock:
            return WeatherSnapshot(
                wind_speed_ms=float(self._rng.uniform(5.0, 15.0)),
                wind_dir_deg=float(self._rng.integers(0, 360)),
                temperature_c=float(self._rng.uniform(15.0, 35.0)),
                condition="Clear",
                description="clear sky",
            )

    def ocean(self, weather: WeatherSnapshot) -> OceanSnapshot:
        with self._lock:
            return derive_ocean_snapshot(weather, self._rng)

    def waypoint_weather(
        self,
        coordinates: Optional[Coordinate] = None,
        waypoint_id: Optional[str] = None,
    ) -> WaypointWeather:
        with self._lock:
            weather = self.weather()
            ocean = self.ocean(weather)
        return WaypointWeather(
            weather=weather,
            ocean=ocean,
            timestamp=datetime.now(timezone.utc),
            coordinates=coordinates,
            waypoint_id=waypoint_id,
            source="synthetic",
        )


class OpenWeatherClient:
    """
    Minimal OpenWeatherMap current-weather client.

    Each request is retried with exponential backoff; exhausted retries
    count as one failure on the circuit breaker.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5",
        timeout_s: float = 10.0,
        max_retries: int = 3,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 10.0,
        breaker: Optional[CircuitBreaker] = None,
        urlopen: Callable = urllib.request.urlopen,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.breaker = breaker or CircuitBreaker(
            name="openweather", failure_threshold=3, recovery_timeout=120,
        )
        self._urlopen = urlopen

        retrying = with_retry(
            max_attempts=max_retries,
            min_wait=retry_min_wait,
            max_wait=retry_max_wait,
            exceptions=(OSError,),
        )(self._request)
        self._fetch = self.breaker(retrying)

    def build_url(self, lat: float, lon: float) -> str:
        params = {"lat": lat, "lon": lon, "appid": self.api_key, "units": "metric"}
        return f"{self.base_url}/weather?{urllib.parse.urlencode(params)}"

    def _request(self, lat: float, lon: float) -> Dict[str, Any]:
        req = urllib.request.Request(self.build_url(lat, lon), headers={"User-Agent": USER_AGENT})
        with self._urlopen(req, timeout=self.timeout_s) as resp:
            body = resp.read()
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise WeatherProviderError(f"Invalid JSON from weather provider: {e}") from e
        if not isinstance(payload, dict):
            raise WeatherProviderError("Unexpected weather payload shape")
        return payload

    def fetch_current(self, lat: float, lon: float) -> Dict[str, Any]:
        """
        Current weather at a point.

        Raises:
            CircuitOpenError: If the provider circuit is open
            OSError: Network or HTTP failure after all retries
            WeatherProviderError: Malformed response
        """
        return self._fetch(lat, lon)


class WeatherService:
    """
    Weather for route waypoints with synthetic fallback.

    Usage:
        service = WeatherService.from_settings(settings)
        table = asyncio.run(service.fetch_route_weather(route.waypoints, route.id))
    """

    def __init__(
        self,
        client: Optional[OpenWeatherClient] = None,
        generator: Optional[SyntheticWeatherGenerator] = None,
    ):
        self.client = client
        self.generator = generator or SyntheticWeatherGenerator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeatherService":
        client = None
        if settings.has_weather_credentials:
            client = OpenWeatherClient(
                api_key=settings.openweather_api_key,
                base_url=settings.openweather_base_url,
                timeout_s=settings.weather_timeout_s,
                max_retries=settings.weather_max_retries,
            )
            register_circuit_breaker(client.breaker)
        else:
            logger.info("No OPENWEATHER_API_KEY set, using synthetic weather")
        return cls(client, SyntheticWeatherGenerator(settings.weather_fallback_seed))

    def fetch_waypoint_weather(
        self,
        coordinates: Coordinate,
        waypoint_id: Optional[str] = None,
    ) -> WaypointWeather:
        """
        Weather and simulated ocean data at one waypoint.

        Never returns empty snapshots: provider failures fall back to
        synthetic data.
        """
        lat, lon = coordinates
        validate_coordinates(lat, lon)
        coordinates = (lat, lon)

        if self.client is None:
            return self.generator.waypoint_weather(coordinates, waypoint_id)

        try:
            payload = self.client.fetch_current(lat, lon)
        except (CircuitOpenError, OSError, WeatherProviderError) as e:
            logger.warning(f"Weather provider failed for {waypoint_id or coordinates}, using fallback: {e}")
            return self.generator.waypoint_weather(coordinates, waypoint_id)

        weather = WeatherSnapshot.from_dict(payload)
        logger.debug(f"Live weather for {waypoint_id or coordinates}: {weather.wind_speed_ms} m/s")
        return WaypointWeather(
            weather=weather,
            ocean=self.generator.ocean(weather),
            timestamp=datetime.now(timezone.utc),
            coordinates=coordinates,
            waypoint_id=waypoint_id,
            source="live",
        )

    async def fetch_route_weather(
        self,
        waypoints: Sequence[Coordinate],
        route_id: str,
    ) -> Dict[str, WaypointWeather]:
        """
        Fetch every waypoint concurrently.

        Returns:
            Dict keyed ``"{route_id}-waypoint-{i}"``; a waypoint whose
            fetch raised holds an error marker instead of data
        """
        ids = [f"{route_id}-waypoint-{i}" for i in range(len(waypoints))]
        logger.info(f"Fetching weather for {len(ids)} waypoints on {route_id}")

        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.fetch_waypoint_weather, tuple(point), waypoint_id)
                for point, waypoint_id in zip(waypoints, ids)
            ),
            return_exceptions=True,
        )

        table: Dict[str, WaypointWeather] = {}
        for point, waypoint_id, result in zip(waypoints, ids, results):
            if isinstance(result, Exception):
                logger.error(f"Failed to fetch weather for {waypoint_id}: {result}")
                table[waypoint_id] = WaypointWeather.error_marker(
                    "Failed to load weather data", tuple(point), waypoint_id,
                )
            else:
                table[waypoint_id] = result

        logger.info(f"Weather ready for {route_id}: {len(table)} waypoints")
        return table
