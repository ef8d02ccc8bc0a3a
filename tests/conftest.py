"""
Shared pytest fixtures for TRADELANE tests.

The API runs against a seeded synthetic weather service so that no
test reaches the network and repeated runs see the same conditions.
"""

import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["OPENWEATHER_API_KEY"] = ""
os.environ.setdefault("WEATHER_FALLBACK_SEED", "42")

from tradelane.data.weather_client import SyntheticWeatherGenerator, WeatherService  # noqa: E402
from tradelane.data.weather_models import (  # noqa: E402
    OceanSnapshot,
    WaypointWeather,
    WeatherSnapshot,
)
from tradelane.routes import Route, Port, get_route  # noqa: E402


# ---------------------------------------------------------------------------
# Section 2: API client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_state():
    """Application state with seeded synthetic weather and a fresh profile."""
    from api.state import get_app_state

    state = get_app_state()
    state.set_weather_service(WeatherService(None, SyntheticWeatherGenerator(seed=42)))
    state.performance.reset()
    yield state
    state.performance.reset()


@pytest.fixture
def client(app_state):
    """FastAPI TestClient over the application."""
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Section 3: Route fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def atlantic_route():
    return get_route("route1")


@pytest.fixture
def suez_route():
    return get_route("route2")


@pytest.fixture
def short_route():
    """Three-waypoint eastbound route along the equator with one major port mid-way."""
    return Route(
        id="short",
        name="Equator Test Route",
        waypoints=((0.0, 0.0), (0.0, 1.0), (0.0, 2.0)),
        ports=(
            Port("Origin", (0.0, 0.0), "major"),
            Port("Midway", (0.0, 1.0), "major"),
            Port("Halt", (0.0, 1.9), "minor"),
        ),
    )


# ---------------------------------------------------------------------------
# Section 4: Weather fixtures
# ---------------------------------------------------------------------------


def make_weather(
    wind_speed_ms=0.0,
    wind_dir_deg=0.0,
    wave_height_m=0.0,
    swell_height_m=0.0,
    swell_dir_deg=0.0,
    current_speed_kts=0.0,
    current_dir_deg=0.0,
    source="client",
):
    """Build a populated WaypointWeather."""
    return WaypointWeather(
        weather=WeatherSnapshot(wind_speed_ms=wind_speed_ms, wind_dir_deg=wind_dir_deg),
        ocean=OceanSnapshot(
            wave_height_m=wave_height_m,
            swell_height_m=swell_height_m,
            swell_dir_deg=swell_dir_deg,
            current_speed_kts=current_speed_kts,
            current_dir_deg=current_dir_deg,
        ),
        timestamp=datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc),
        source=source,
    )


@pytest.fixture
def calm_weather():
    return make_weather()


@pytest.fixture
def beam_weather():
    """Wind, waves and swell on the beam of an eastbound ship, 2 kn current astern."""
    return make_weather(
        wind_speed_ms=10.0,
        wind_dir_deg=180.0,
        wave_height_m=1.5,
        swell_height_m=1.0,
        swell_dir_deg=180.0,
        current_speed_kts=2.0,
        current_dir_deg=90.0,
    )


@pytest.fixture
def storm_weather():
    """Gale and high seas for a northbound ship, 1 kn current setting south."""
    return make_weather(
        wind_speed_ms=20.0,
        wind_dir_deg=0.0,
        wave_height_m=4.0,
        swell_height_m=3.0,
        swell_dir_deg=0.0,
        current_speed_kts=1.0,
        current_dir_deg=180.0,
    )


class StubWeatherSource:
    """Async weather source returning a fixed sample for every waypoint."""

    def __init__(self, sample=None, missing=()):
        self.sample = sample
        self.missing = set(missing)
        self.calls = 0

    async def fetch_route_weather(self, waypoints, route_id):
        self.calls += 1
        table = {}
        for i in range(len(waypoints)):
            if i in self.missing:
                continue
            table[f"{route_id}-waypoint-{i}"] = self.sample
        return table


@pytest.fixture
def stub_source(calm_weather):
    return StubWeatherSource(calm_weather)


@pytest.fixture
def weather_factory():
    """Factory for populated waypoint weather."""
    return make_weather


@pytest.fixture
def stub_source_factory():
    return StubWeatherSource
