"""Weather-affected speed, fuel and cost estimators."""

from .profile import (
    CostSchedule,
    FuelModelConfig,
    PerformanceProfile,
    PortFeePolicy,
    ShipProfile,
)
from .resistance import (
    DirectionConvention,
    ForceKind,
    ForceState,
    ResistanceResult,
    normalize_angle,
    resolve_along_course,
    calculate_wind_resistance,
    calculate_wave_resistance,
    calculate_swell_resistance,
    calculate_current_effect,
)
from .speed_model import SpeedResult, WeatherSpeedModel, calculate_weather_affected_speed
from .fuel import FuelConsumption, FuelEstimator, calculate_fuel_consumption, weather_fuel_multiplier
from .cost import CostBreakdown, CostEstimator, RouteCost
from .route_metrics import RouteMetrics, estimate_route_metrics

__all__ = [
    "CostSchedule",
    "FuelModelConfig",
    "PerformanceProfile",
    "PortFeePolicy",
    "ShipProfile",
    "DirectionConvention",
    "ForceKind",
    "ForceState",
    "ResistanceResult",
    "normalize_angle",
    "resolve_along_course",
    "calculate_wind_resistance",
    "calculate_wave_resistance",
    "calculate_swell_resistance",
    "calculate_current_effect",
    "SpeedResult",
    "WeatherSpeedModel",
    "calculate_weather_affected_speed",
    "FuelConsumption",
    "FuelEstimator",
    "calculate_fuel_consumption",
    "weather_fuel_multiplier",
    "CostBreakdown",
    "CostEstimator",
    "RouteCost",
    "RouteMetrics",
    "estimate_route_metrics",
]
