"""
Whole-route summary from average waypoint conditions.

A coarse estimate for comparing routes: speed and daily fuel burn are
scaled by step factors for average wind, average wave height and canal
transit. Waypoints without weather are skipped when averaging; with no
data at all the averages default to moderate conditions.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

from tradelane.data.weather_models import coerce_waypoint_weather
from tradelane.routes.catalog import Route
from tradelane.routes.geo import KM_PER_NM
from tradelane.validation import validate_speed

DEFAULT_AVG_WIND_MS = 10.0
DEFAULT_AVG_WAVE_M = 1.5
BASE_FUEL_TONNES_PER_DAY = 175.0


@dataclass(frozen=True)
class RouteMetrics:
    route_id: str
    total_distance_km: float
    base_speed_kts: float
    adjusted_speed_kts: float
    travel_time_hours: float
    travel_time_days: float
    total_fuel_tonnes: float
    avg_wind_speed_ms: float
    avg_wave_height_m: float
    speed_adjustment: float
    fuel_adjustment: float
    waypoints_with_data: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def estimate_route_metrics(
    route: Route,
    weather_table: Optional[Mapping[str, Any]] = None,
    base_speed_kts: float = 20.0,
) -> RouteMetrics:
    """
    Summarize distance, travel time and fuel for a route.

    Args:
        route: Route to summarize
        weather_table: Waypoint weather keyed by ``route.waypoint_id(i)``
        base_speed_kts: Calm-water speed (kn), must be > 0

    Returns:
        RouteMetrics
    """
    base_speed_kts = validate_speed(base_speed_kts, "base_speed_kts")
    weather_table = weather_table or {}

    total_wind = 0.0
    total_wave = 0.0
    count = 0
    for i in range(len(route.waypoints)):
        sample = coerce_waypoint_weather(weather_table.get(route.waypoint_id(i)))
        if sample is not None and sample.has_data:
            total_wind += sample.weather.wind_speed_ms
            total_wave += sample.ocean.wave_height_m
            count += 1

    avg_wind = total_wind / count if count else DEFAULT_AVG_WIND_MS
    avg_wave = total_wave / count if count else DEFAULT_AVG_WAVE_M

    speed_adjustment = 1.0
    if avg_wind > 15:
        speed_adjustment *= 0.9
    elif avg_wind > 10:
        speed_adjustment *= 0.95
    if avg_wave > 3:
        speed_adjustment *= 0.8
    elif avg_wave > 2:
        speed_adjustment *= 0.9
    if route.is_canal_route:
        # Canal approaches are congested
        speed_adjustment *= 0.95

    fuel_adjustment = 1.0
    if avg_wind > 15:
        fuel_adjustment *= 1.15
    if avg_wave > 3:
        fuel_adjustment *= 1.2
    if route.is_canal_route:
        fuel_adjustment *= 1.05

    distance_km = route.total_distance_km
    adjusted_speed = base_speed_kts * speed_adjustment
    hours = distance_km / (adjusted_speed * KM_PER_NM)
    days = hours / 24

    return RouteMetrics(
        route_id=route.id,
        total_distance_km=distance_km,
        base_speed_kts=base_speed_kts,
        adjusted_speed_kts=adjusted_speed,
        travel_time_hours=hours,
        travel_time_days=days,
        total_fuel_tonnes=BASE_FUEL_TONNES_PER_DAY * days * fuel_adjustment,
        avg_wind_speed_ms=avg_wind,
        avg_wave_height_m=avg_wave,
        speed_adjustment=speed_adjustment,
        fuel_adjustment=fuel_adjustment,
        waypoints_with_data=count,
    )
