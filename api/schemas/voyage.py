"""Voyage estimation API schemas."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .common import PortFeePolicyName, Position
from .weather import WeatherPayload


class SpeedRequest(BaseModel):
    """Request for weather-affected speed at one point."""
    base_speed_kts: Optional[float] = Field(
        None, description="Calm-water service speed in knots, defaults to the profile's",
    )
    course_deg: float = Field(..., ge=-360, le=360, description="Ship's course in degrees")
    weather: Optional[WeatherPayload] = None


class ResistanceFactorModel(BaseModel):
    """Effect of one environmental force."""
    kind: str
    relative_angle_deg: float
    along_course: float
    speed_impact_kts: float
    state: str
    force_n: float = 0.0
    flags: Dict[str, bool]


class SpeedResponse(BaseModel):
    sog_kts: float
    stw_kts: float
    power_increase_kw: float
    fuel_increase_kgh: float
    total_resistance: float
    total_speed_impact_kts: float
    factors: Dict[str, ResistanceFactorModel]


class FuelRequest(BaseModel):
    """Request for fuel consumption at a waypoint."""
    speed_kts: float = Field(..., ge=0, description="Actual speed in knots")
    waypoint_index: int = Field(..., ge=0)
    total_waypoints: int = Field(..., ge=1)
    base_speed_kts: Optional[float] = Field(
        None, description="Normalization speed in knots, defaults to the profile's",
    )
    weather: Optional[WeatherPayload] = None


class FuelResponse(BaseModel):
    current_kgh: float
    remaining_kg: float
    total_kg: float
    weather_multiplier: float
    speed_factor: float
    resistance_factor: float


class CostRequest(BaseModel):
    """Request for the remaining voyage cost on a catalog route."""
    route_id: str
    waypoint_index: int = Field(..., ge=0)
    fuel_kg: float = Field(..., ge=0, description="Projected fuel in kg")
    weather: Optional[WeatherPayload] = None
    port_fee_policy: Optional[PortFeePolicyName] = None


class CostBreakdownModel(BaseModel):
    fuel: float
    operational: float
    ports: float
    canal: float
    weather: float


class CostResponse(BaseModel):
    fuel_cost: float
    operational_cost: float
    port_fees: float
    canal_fees: float
    weather_multiplier: float
    base_cost: float
    total: float
    breakdown: CostBreakdownModel
    port_calls: int


class TravelTimeRequest(BaseModel):
    start: Position
    end: Position
    speed_kts: float = Field(..., description="Speed in knots, must be positive")


class TravelTimeResponse(BaseModel):
    distance_km: float
    speed_kmh: float
    time_hours: float
    time_minutes: float
    formatted: str


class EstimateRequest(BaseModel):
    """
    Speed, fuel and cost at one waypoint of a catalog route.

    Weather is fetched for the waypoint when not supplied.
    """
    route_id: str
    waypoint_index: int = Field(..., ge=0)
    base_speed_kts: Optional[float] = Field(
        None, description="Calm-water service speed in knots, defaults to the profile's",
    )
    weather: Optional[WeatherPayload] = None
    port_fee_policy: Optional[PortFeePolicyName] = None


class EstimateResponse(BaseModel):
    route_id: str
    waypoint_index: int
    waypoint_id: str
    course_deg: float
    weather_source: Optional[str] = None
    speed: SpeedResponse
    fuel: Optional[FuelResponse] = None
    cost: Optional[CostResponse] = None


class ShipProfileUpdate(BaseModel):
    length_m: Optional[float] = Field(None, gt=0)
    beam_m: Optional[float] = Field(None, gt=0)
    height_m: Optional[float] = Field(None, gt=0)
    drag_coefficient: Optional[float] = Field(None, gt=0)
    wind_resistance_coefficient: Optional[float] = Field(None, ge=0)
    wave_resistance_coefficient: Optional[float] = Field(None, ge=0)
    swell_resistance_coefficient: Optional[float] = Field(None, ge=0)
    base_power_kw: Optional[float] = Field(None, gt=0)
    sfoc_kg_per_kwh: Optional[float] = Field(None, gt=0)
    min_stw_kts: Optional[float] = Field(None, ge=0)


class FuelModelUpdate(BaseModel):
    base_fuel_kgh: Optional[float] = Field(None, gt=0)
    base_speed_kts: Optional[float] = Field(None, gt=0)
    hours_per_waypoint: Optional[float] = Field(None, gt=0)


class CostScheduleUpdate(BaseModel):
    fuel_price_per_kg: Optional[float] = Field(None, ge=0)
    operational_cost_per_hour: Optional[float] = Field(None, ge=0)
    port_fee_per_call: Optional[float] = Field(None, ge=0)
    canal_fee: Optional[float] = Field(None, ge=0)
    port_fee_policy: Optional[PortFeePolicyName] = None


class ProfileUpdateRequest(BaseModel):
    """Partial update of the performance profile."""
    ship: Optional[ShipProfileUpdate] = None
    fuel: Optional[FuelModelUpdate] = None
    cost: Optional[CostScheduleUpdate] = None


class ProfileResponse(BaseModel):
    ship: Dict[str, float]
    fuel: Dict[str, float]
    cost: Dict[str, Any]
