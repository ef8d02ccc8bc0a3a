"""Voyage simulation API schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .common import PortFeePolicyName
from .voyage import CostResponse, FuelResponse
from .weather import WeatherPayload


class SimulationRequest(BaseModel):
    """
    Run a voyage simulation over a catalog route.

    ``weather`` optionally supplies conditions keyed by waypoint id
    (``"{route_id}-waypoint-{i}"``); otherwise weather is fetched.
    """
    base_speed_kts: Optional[float] = Field(None, description="Defaults to the profile's base speed")
    port_fee_policy: Optional[PortFeePolicyName] = None
    weather: Optional[Dict[str, WeatherPayload]] = None


class SimulationStepModel(BaseModel):
    index: int
    waypoint_id: str
    lat: float
    lon: float
    course_deg: float
    progress_pct: float
    sog_kts: float
    stw_kts: float
    has_weather: bool
    fuel: Optional[FuelResponse] = None
    cost: Optional[CostResponse] = None
    segment_hours: Optional[float] = None
    elapsed_hours: float


class SimulationResponse(BaseModel):
    route_id: str
    route_name: str
    completed: bool
    total_time_hours: float
    total_time_formatted: str
    steps: List[SimulationStepModel]
