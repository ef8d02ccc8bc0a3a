"""
Input validation for TRADELANE estimators.

Invalid arguments are rejected at the function boundary so that the
math below never produces infinite or NaN results.
"""

import math
from typing import Any


class InvalidInputError(ValueError):
    """Raised when an estimator receives an argument outside its domain."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


def validate_speed(speed_kts: float, field: str = "speed_kts") -> float:
    """
    Validate a vessel speed used as a divisor.

    Args:
        speed_kts: Speed in knots
        field: Field name reported in the error

    Returns:
        The speed as float

    Raises:
        InvalidInputError: If the speed is not a finite positive number
    """
    try:
        value = float(speed_kts)
    except (TypeError, ValueError):
        raise InvalidInputError(field, speed_kts, "must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, speed_kts, "must be finite")
    if value <= 0:
        raise InvalidInputError(field, speed_kts, "must be greater than 0")
    return value


def validate_coordinates(
    lat: float,
    lon: float,
    lat_field: str = "latitude",
    lon_field: str = "longitude",
) -> None:
    """Validate a latitude/longitude pair in decimal degrees."""
    for value, field, bound in ((lat, lat_field, 90.0), (lon, lon_field, 180.0)):
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(field, value, "must be a finite number")
        if abs(value) > bound:
            raise InvalidInputError(field, value, f"must be within ±{bound:g}")


def validate_waypoint_index(index: int, total_waypoints: int) -> None:
    """Validate a waypoint position against the route length."""
    if total_waypoints < 0:
        raise InvalidInputError("total_waypoints", total_waypoints, "must not be negative")
    if index < 0:
        raise InvalidInputError("waypoint_index", index, "must not be negative")
    if total_waypoints and index >= total_waypoints:
        raise InvalidInputError(
            "waypoint_index", index, f"must be below total_waypoints={total_waypoints}"
        )
