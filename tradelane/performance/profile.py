"""
Ship and tariff parameters for the performance estimators.

Every constant the resistance, speed, fuel and cost models use lives
here so alternate ship classes or fare tables can be injected without
code changes. Defaults describe a large container ship (400 m LOA)
and the demo tariff table.
"""

from dataclasses import dataclass, field, replace
from enum import Enum


class PortFeePolicy(str, Enum):
    """How remaining port calls are counted for port fees."""
    HEURISTIC = "heuristic"  # one major port per 10 remaining waypoints
    EXACT = "exact"  # major port markers beyond the current waypoint


@dataclass(frozen=True)
class ShipProfile:
    """Ship particulars and empirical weather coefficients."""

    # Dimensions (typical large container ship)
    length_m: float = 400.0
    beam_m: float = 60.0
    height_m: float = 45.0  # Above-water height used for transverse area

    # Air and wind
    air_density: float = 1.225  # kg/m³
    drag_coefficient: float = 0.8
    wind_resistance_coefficient: float = 0.025  # kn per m/s along-course wind

    # Sea state
    wave_resistance_coefficient: float = 0.3  # kn loss per m head wave
    swell_resistance_coefficient: float = 0.2  # kn loss per m head swell

    # Propulsion
    base_power_kw: float = 7000.0  # Power at base speed
    sfoc_kg_per_kwh: float = 0.18
    min_stw_kts: float = 5.0  # Floor on required speed through water

    @property
    def transverse_area_m2(self) -> float:
        return self.beam_m * self.height_m


@dataclass(frozen=True)
class FuelModelConfig:
    """Fuel burn normalization and weather penalty table."""

    base_fuel_kgh: float = 1260.0  # kg/h at base speed
    base_speed_kts: float = 20.0
    hours_per_waypoint: float = 2.0
    min_speed_factor: float = 0.5
    resistance_weight: float = 0.5

    # Wind penalty: strong takes precedence over moderate
    wind_strong_ms: float = 15.0
    wind_strong_multiplier: float = 1.2
    wind_moderate_ms: float = 10.0
    wind_moderate_multiplier: float = 1.1

    # Wave penalty: high takes precedence over moderate
    wave_high_m: float = 3.0
    wave_high_multiplier: float = 1.25
    wave_moderate_m: float = 2.0
    wave_moderate_multiplier: float = 1.15


@dataclass(frozen=True)
class CostSchedule:
    """Voyage tariff table in USD."""

    fuel_price_per_kg: float = 0.8
    operational_cost_per_hour: float = 5000.0
    port_fee_per_call: float = 15000.0
    canal_fee: float = 500000.0
    hours_per_waypoint: float = 2.0
    waypoints_per_port_call: int = 10  # Heuristic policy divisor
    port_fee_policy: PortFeePolicy = PortFeePolicy.HEURISTIC

    # Severe-weather surcharge (single step)
    severe_wind_ms: float = 15.0
    severe_wave_m: float = 3.0
    severe_weather_multiplier: float = 1.1


@dataclass(frozen=True)
class PerformanceProfile:
    """Bundle of ship, fuel and cost parameters."""
    ship: ShipProfile = field(default_factory=ShipProfile)
    fuel: FuelModelConfig = field(default_factory=FuelModelConfig)
    cost: CostSchedule = field(default_factory=CostSchedule)

    def with_base_speed(self, base_speed_kts: float) -> "PerformanceProfile":
        """Copy with the fuel normalization speed replaced."""
        return replace(self, fuel=replace(self.fuel, base_speed_kts=base_speed_kts))

    def with_port_fee_policy(self, policy: PortFeePolicy) -> "PerformanceProfile":
        return replace(self, cost=replace(self.cost, port_fee_policy=PortFeePolicy(policy)))
