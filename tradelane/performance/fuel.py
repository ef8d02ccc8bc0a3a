"""
Fuel consumption estimator.

Normalizes a base burn rate (kg/h at the base speed) by the actual
speed and a weather penalty, then projects the remaining burn from
the number of waypoints left on the route.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from tradelane.data.weather_models import coerce_waypoint_weather
from tradelane.performance.profile import FuelModelConfig
from tradelane.validation import InvalidInputError, validate_speed, validate_waypoint_index


@dataclass(frozen=True)
class FuelConsumption:
    """Fuel figures at one waypoint."""
    current_kgh: float
    remaining_kg: float
    total_kg: float
    weather_multiplier: float
    speed_factor: float
    resistance_factor: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def weather_fuel_multiplier(
    wind_speed_ms: float,
    wave_height_m: float,
    config: Optional[FuelModelConfig] = None,
) -> float:
    """
    Compound weather penalty on fuel burn.

    Wind and wave steps apply independently; within each, the stronger
    threshold takes precedence. Calm conditions give exactly 1.0.
    """
    config = config or FuelModelConfig()
    multiplier = 1.0

    if wind_speed_ms > config.wind_strong_ms:
        multiplier *= config.wind_strong_multiplier
    elif wind_speed_ms > config.wind_moderate_ms:
        multiplier *= config.wind_moderate_multiplier

    if wave_height_m > config.wave_high_m:
        multiplier *= config.wave_high_multiplier
    elif wave_height_m > config.wave_moderate_m:
        multiplier *= config.wave_moderate_multiplier

    return multiplier


class FuelEstimator:
    """Fuel consumption for a ship sailing a waypoint route."""

    def __init__(self, config: Optional[FuelModelConfig] = None):
        self.config = config or FuelModelConfig()

    def estimate(
        self,
        speed_kts: float,
        weather: Any,
        waypoint_index: int,
        total_waypoints: int,
        base_speed_kts: Optional[float] = None,
    ) -> FuelConsumption:
        """
        Estimate fuel at the current waypoint.

        Args:
            speed_kts: Actual speed (kn), usually the weather-affected SOG
            weather: WaypointWeather, mapping, or None (no weather penalty)
            waypoint_index: Current waypoint position
            total_waypoints: Number of waypoints on the route
            base_speed_kts: Normalization speed, defaults to the config value

        Returns:
            FuelConsumption

        Raises:
            InvalidInputError: On a non-positive base speed, a negative
                speed or an out-of-range waypoint index
        """
        config = self.config
        base = validate_speed(
            config.base_speed_kts if base_speed_kts is None else base_speed_kts,
            "base_speed_kts",
        )
        if speed_kts < 0:
            raise InvalidInputError("speed_kts", speed_kts, "must not be negative")
        validate_waypoint_index(waypoint_index, total_waypoints)

        speed_factor = max(config.min_speed_factor, speed_kts / base)
        resistance_factor = 1 + abs(speed_kts - base) / base * config.resistance_weight

        sample = coerce_waypoint_weather(weather)
        if sample is not None and sample.has_data:
            multiplier = weather_fuel_multiplier(
                sample.weather.wind_speed_ms, sample.ocean.wave_height_m, config,
            )
        else:
            multiplier = 1.0

        current = config.base_fuel_kgh * resistance_factor * multiplier / speed_factor
        remaining_hours = (total_waypoints - waypoint_index) * config.hours_per_waypoint
        remaining = current * remaining_hours

        return FuelConsumption(
            current_kgh=current,
            remaining_kg=remaining,
            total_kg=current + remaining,
            weather_multiplier=multiplier,
            speed_factor=speed_factor,
            resistance_factor=resistance_factor,
        )


def calculate_fuel_consumption(
    speed_kts: float,
    weather: Any,
    waypoint_index: int,
    total_waypoints: int,
    base_speed_kts: float = 20.0,
    config: Optional[FuelModelConfig] = None,
) -> FuelConsumption:
    """Shortcut for ``FuelEstimator(config).estimate``."""
    return FuelEstimator(config).estimate(
        speed_kts, weather, waypoint_index, total_waypoints, base_speed_kts,
    )
