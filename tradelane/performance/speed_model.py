"""
Weather-affected speed model.

Combines wind, wave, swell and current effects into speed over ground
(SOG), the speed through water (STW) needed to hold the schedule, and
the resulting propulsion power and fuel increase.

Power follows the cube law against the base speed:
    P = P_base · (STW / V_base)³, increase = max(0, P − P_base)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from tradelane.data.weather_models import WaypointWeather, coerce_waypoint_weather
from tradelane.performance.profile import ShipProfile
from tradelane.performance.resistance import (
    ResistanceResult,
    calculate_current_effect,
    calculate_swell_resistance,
    calculate_wave_resistance,
    calculate_wind_resistance,
)
from tradelane.validation import validate_speed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeedResult:
    """Weather-affected speeds and propulsion figures for one waypoint."""
    sog_kts: float
    stw_kts: float
    power_increase_kw: float = 0.0
    fuel_increase_kgh: float = 0.0
    total_resistance: float = 0.0  # Display aggregate: N plus scaled kn losses
    total_speed_impact_kts: float = 0.0
    factors: Dict[str, ResistanceResult] = field(default_factory=dict)

    @property
    def has_weather(self) -> bool:
        return bool(self.factors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sog_kts": self.sog_kts,
            "stw_kts": self.stw_kts,
            "power_increase_kw": self.power_increase_kw,
            "fuel_increase_kgh": self.fuel_increase_kgh,
            "total_resistance": self.total_resistance,
            "total_speed_impact_kts": self.total_speed_impact_kts,
            "factors": {name: result.to_dict() for name, result in self.factors.items()},
        }


class WeatherSpeedModel:
    """
    Composite speed calculator for a given ship.

    Missing weather is not an error: the base speed is returned
    unchanged with zero power and fuel increase.
    """

    def __init__(self, ship: Optional[ShipProfile] = None):
        self.ship = ship or ShipProfile()

    def calculate(
        self,
        base_speed_kts: float,
        weather: Any,
        ship_course_deg: float,
    ) -> SpeedResult:
        """
        Calculate weather-affected speed at one waypoint.

        Args:
            base_speed_kts: Calm-water service speed (kn), must be > 0
            weather: WaypointWeather, an equivalent mapping, or None
            ship_course_deg: Ship's course over ground (degrees)

        Returns:
            SpeedResult

        Raises:
            InvalidInputError: If base_speed_kts is not a finite positive number
        """
        base_speed_kts = validate_speed(base_speed_kts, "base_speed_kts")
        sample: Optional[WaypointWeather] = coerce_waypoint_weather(weather)

        if sample is None or not sample.has_data:
            logger.debug("No weather data, using base speed")
            return SpeedResult(sog_kts=base_speed_kts, stw_kts=base_speed_kts)

        atmos = sample.weather
        ocean = sample.ocean
        ship = self.ship

        wind = calculate_wind_resistance(
            atmos.wind_speed_ms, atmos.wind_dir_deg, ship_course_deg, base_speed_kts, ship,
        )
        # Wave direction is not observed; waves are resolved along the swell direction
        waves = calculate_wave_resistance(
            ocean.wave_height_m, ocean.swell_dir_deg, ship_course_deg, ship,
        )
        swell = calculate_swell_resistance(
            ocean.swell_height_m, ocean.swell_dir_deg, ship_course_deg, ship,
        )
        current = calculate_current_effect(
            ocean.current_speed_kts, ocean.current_dir_deg, ship_course_deg,
        )
        factors = {"wind": wind, "waves": waves, "swell": swell, "current": current}

        total_impact = sum(f.sog_contribution_kts for f in factors.values())

        sog = max(0.0, base_speed_kts + total_impact)
        stw = max(ship.min_stw_kts, base_speed_kts - total_impact)

        required_power = ship.base_power_kw * (stw / base_speed_kts) ** 3
        power_increase = max(0.0, required_power - ship.base_power_kw)
        fuel_increase = max(0.0, power_increase * ship.sfoc_kg_per_kwh)

        total_resistance = (
            wind.force_n + waves.speed_impact_kts * 1000 + swell.speed_impact_kts * 1000
        )

        return SpeedResult(
            sog_kts=sog,
            stw_kts=stw,
            power_increase_kw=power_increase,
            fuel_increase_kgh=fuel_increase,
            total_resistance=total_resistance,
            total_speed_impact_kts=total_impact,
            factors=factors,
        )


_default_model = WeatherSpeedModel()


def calculate_weather_affected_speed(
    base_speed_kts: float,
    weather: Any,
    ship_course_deg: float,
    ship: Optional[ShipProfile] = None,
) -> SpeedResult:
    """Module-level shortcut for ``WeatherSpeedModel(ship).calculate``."""
    model = WeatherSpeedModel(ship) if ship is not None else _default_model
    return model.calculate(base_speed_kts, weather, ship_course_deg)
