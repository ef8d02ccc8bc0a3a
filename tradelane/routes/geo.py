"""
Great-circle geometry for route waypoints.

Distances are in kilometres on a spherical Earth (R = 6371 km), the
unit the route tables and map client display.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from tradelane.validation import validate_speed

Coordinate = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0
KM_PER_NM = 1.852

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)
WIND_ARROWS = ("↑", "↗", "→", "↘", "↓", "↙", "←", "↖")


@dataclass(frozen=True)
class TravelTime:
    """Time needed to cover one leg at a given speed."""
    distance_km: float
    speed_kmh: float
    time_hours: float
    time_minutes: float

    @property
    def formatted(self) -> str:
        """Hours and minutes, e.g. ``"12h 30m"``."""
        return format_hours(self.time_hours)


def format_hours(hours: float) -> str:
    """Duration as whole hours and rounded minutes."""
    total_minutes = round(hours * 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great circle distance between two points.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in kilometres
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def route_distance_km(points: Sequence[Coordinate]) -> float:
    """
    Total length of a polyline as the sum of its leg distances.

    Fewer than two points give 0.
    """
    total = 0.0
    for (lat1, lon1), (lat2, lon2) in zip(points, points[1:]):
        total += haversine_km(lat1, lon1, lat2, lon2)
    return total


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate initial bearing from point 1 to point 2.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Bearing in degrees (0-360)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    x = math.sin(dlon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon))

    bearing = math.degrees(math.atan2(x, y))
    return (bearing + 360) % 360


def calculate_travel_time(start: Coordinate, end: Coordinate, speed_kts: float) -> TravelTime:
    """
    Estimate travel time between two waypoints.

    Args:
        start: (lat, lon) of the first waypoint
        end: (lat, lon) of the second waypoint
        speed_kts: Speed in knots, must be > 0

    Returns:
        TravelTime with distance, speed in km/h, hours and minutes

    Raises:
        InvalidInputError: If speed_kts is not positive
    """
    distance_km = haversine_km(start[0], start[1], end[0], end[1])
    return travel_time_for_distance(distance_km, speed_kts)


def travel_time_for_distance(distance_km: float, speed_kts: float) -> TravelTime:
    """Time to cover ``distance_km`` at ``speed_kts``."""
    speed_kts = validate_speed(speed_kts, "speed_kts")
    speed_kmh = speed_kts * KM_PER_NM
    time_hours = distance_km / speed_kmh
    return TravelTime(
        distance_km=distance_km,
        speed_kmh=speed_kmh,
        time_hours=time_hours,
        time_minutes=time_hours * 60,
    )


def direction_name(degrees: float) -> str:
    """16-point compass name for a direction in degrees."""
    return COMPASS_POINTS[round((degrees % 360) / 22.5) % 16]


def wind_arrow(degrees: float) -> str:
    """8-way arrow for a direction in degrees."""
    return WIND_ARROWS[round((degrees % 360) / 45) % 8]
