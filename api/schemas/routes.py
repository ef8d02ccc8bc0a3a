"""Trade route API schemas."""

from typing import List

from pydantic import BaseModel, Field

from .common import Position


class PortModel(BaseModel):
    name: str
    lat: float
    lon: float
    port_type: str
    waypoint_index: int


class RouteLegModel(BaseModel):
    index: int
    start: Position
    end: Position
    distance_km: float
    bearing_deg: float


class RouteSummaryModel(BaseModel):
    id: str
    name: str
    style: str
    color: str
    is_canal_route: bool
    waypoint_count: int
    total_distance_km: float


class RouteDetailModel(RouteSummaryModel):
    waypoints: List[Position]
    ports: List[PortModel]
    legs: List[RouteLegModel]


class DistanceRequest(BaseModel):
    """Polyline whose length is requested."""
    points: List[Position] = Field(default_factory=list, max_length=10000)


class DistanceResponse(BaseModel):
    distance_km: float
    distance_nm: float
    leg_count: int


class RouteMetricsResponse(BaseModel):
    """Whole-route summary from average waypoint conditions."""
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
