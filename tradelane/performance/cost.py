"""
Remaining-voyage cost estimator (USD).

Cost components:
    fuel        projected fuel (kg) × fuel price
    operational remaining hours × hourly running cost
    ports       remaining major port calls × port fee
    canal       flat canal fee on canal routes
A single-step surcharge is applied on top in severe weather.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

from tradelane.data.weather_models import coerce_waypoint_weather
from tradelane.performance.fuel import FuelConsumption
from tradelane.performance.profile import CostSchedule, PortFeePolicy
from tradelane.routes.catalog import Route
from tradelane.validation import InvalidInputError, validate_waypoint_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostBreakdown:
    fuel: float
    operational: float
    ports: float
    canal: float
    weather: float


@dataclass(frozen=True)
class RouteCost:
    """Cost of the rest of the voyage from one waypoint."""
    fuel_cost: float
    operational_cost: float
    port_fees: float
    canal_fees: float
    weather_multiplier: float
    base_cost: float
    total: float
    breakdown: CostBreakdown
    port_calls: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CostEstimator:
    """Route cost with an injectable tariff table and port-count policy."""

    def __init__(self, schedule: Optional[CostSchedule] = None):
        self.schedule = schedule or CostSchedule()

    def count_port_calls(self, route: Route, waypoint_index: int) -> int:
        """Major port calls still ahead of the given waypoint."""
        schedule = self.schedule
        if schedule.port_fee_policy is PortFeePolicy.EXACT:
            return len(route.major_ports_after(waypoint_index))
        remaining = len(route.waypoints) - waypoint_index
        return math.floor(remaining / schedule.waypoints_per_port_call)

    def weather_multiplier(self, weather: Any) -> float:
        sample = coerce_waypoint_weather(weather)
        if sample is None or not sample.has_data:
            return 1.0
        schedule = self.schedule
        severe = (
            sample.weather.wind_speed_ms > schedule.severe_wind_ms
            or sample.ocean.wave_height_m > schedule.severe_wave_m
        )
        return schedule.severe_weather_multiplier if severe else 1.0

    def estimate(
        self,
        route: Route,
        waypoint_index: int,
        fuel: Union[FuelConsumption, float],
        weather: Any = None,
    ) -> RouteCost:
        """
        Estimate the remaining voyage cost.

        Args:
            route: Route being sailed
            waypoint_index: Current waypoint position
            fuel: FuelConsumption, or projected total fuel in kg
            weather: Conditions at the current waypoint (None = no surcharge)

        Returns:
            RouteCost with total >= base_cost

        Raises:
            InvalidInputError: On an out-of-range waypoint index or negative fuel
        """
        schedule = self.schedule
        total_waypoints = len(route.waypoints)
        validate_waypoint_index(waypoint_index, total_waypoints)

        fuel_kg = fuel.total_kg if isinstance(fuel, FuelConsumption) else float(fuel)
        if fuel_kg < 0:
            raise InvalidInputError("fuel_kg", fuel_kg, "must not be negative")

        remaining_hours = (total_waypoints - waypoint_index) * schedule.hours_per_waypoint
        port_calls = self.count_port_calls(route, waypoint_index)

        fuel_cost = fuel_kg * schedule.fuel_price_per_kg
        operational = remaining_hours * schedule.operational_cost_per_hour
        port_fees = port_calls * schedule.port_fee_per_call
        canal_fees = schedule.canal_fee if route.is_canal_route else 0.0

        multiplier = self.weather_multiplier(weather)
        base_cost = fuel_cost + operational + port_fees + canal_fees
        total = base_cost * multiplier

        logger.debug(
            f"Cost for {route.id} at waypoint {waypoint_index}: "
            f"base ${base_cost:,.0f}, multiplier {multiplier}"
        )

        return RouteCost(
            fuel_cost=fuel_cost,
            operational_cost=operational,
            port_fees=port_fees,
            canal_fees=canal_fees,
            weather_multiplier=multiplier,
            base_cost=base_cost,
            total=total,
            breakdown=CostBreakdown(
                fuel=fuel_cost,
                operational=operational,
                ports=port_fees,
                canal=canal_fees,
                weather=base_cost * (multiplier - 1),
            ),
            port_calls=port_calls,
        )
