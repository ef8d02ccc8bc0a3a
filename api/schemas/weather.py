"""Weather-related API schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class WeatherPayload(BaseModel):
    """
    Waypoint weather supplied by a client.

    ``weather`` accepts the OpenWeatherMap shape
    (``{"wind": {"speed", "deg"}, "main": {"temp"}}``) or flat
    snake_case keys; ``ocean`` accepts camelCase or snake_case keys.
    Numeric strings are accepted. Leave either out for "no data".
    """
    weather: Optional[Dict[str, Any]] = None
    ocean: Optional[Dict[str, Any]] = None


class WeatherSnapshotModel(BaseModel):
    wind_speed_ms: float
    wind_dir_deg: float
    temperature_c: float
    condition: str
    description: str = ""
    icon: Optional[str] = None


class OceanSnapshotModel(BaseModel):
    wave_height_m: float
    swell_height_m: float
    swell_dir_deg: float
    current_speed_kts: float
    current_dir_deg: float
    water_temp_c: float
    visibility_km: float


class WaypointWeatherResponse(BaseModel):
    """Weather and ocean conditions at one waypoint."""
    waypoint_id: Optional[str] = None
    coordinates: Optional[List[float]] = None
    timestamp: datetime
    source: str
    weather: Optional[WeatherSnapshotModel] = None
    ocean: Optional[OceanSnapshotModel] = None
    error: Optional[str] = None

    # Display helpers
    wind_direction_name: Optional[str] = None
    wind_arrow: Optional[str] = None
    icon: Optional[str] = None


class RouteWeatherResponse(BaseModel):
    """Weather for every waypoint of a route, keyed by waypoint id."""
    route_id: str
    waypoint_count: int = Field(..., ge=0)
    waypoints: Dict[str, WaypointWeatherResponse]
