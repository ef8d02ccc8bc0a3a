"""Trade route table and great-circle geometry."""

from .geo import (
    Coordinate,
    KM_PER_NM,
    TravelTime,
    haversine_km,
    route_distance_km,
    calculate_bearing,
    calculate_travel_time,
    travel_time_for_distance,
    format_hours,
    direction_name,
    wind_arrow,
)
from .catalog import Port, Route, RouteLeg, ROUTES, get_route, list_routes

__all__ = [
    "Coordinate",
    "KM_PER_NM",
    "TravelTime",
    "haversine_km",
    "route_distance_km",
    "calculate_bearing",
    "calculate_travel_time",
    "travel_time_for_distance",
    "format_hours",
    "direction_name",
    "wind_arrow",
    "Port",
    "Route",
    "RouteLeg",
    "ROUTES",
    "get_route",
    "list_routes",
]
