"""
Voyage estimation API router.

Weather-affected speed, fuel consumption, remaining cost and travel
time, individually or chained for one route waypoint, plus the
performance profile the estimators are built from.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.routers.weather import weather_from_payload
from api.schemas import (
    CostRequest,
    CostResponse,
    ErrorResponse,
    EstimateRequest,
    EstimateResponse,
    FuelRequest,
    FuelResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SpeedRequest,
    SpeedResponse,
    TravelTimeRequest,
    TravelTimeResponse,
)
from api.state import get_app_state
from tradelane.performance.cost import CostEstimator
from tradelane.performance.profile import PortFeePolicy
from tradelane.routes import Route, calculate_travel_time, get_route
from tradelane.validation import validate_waypoint_index

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Voyage"])

DOMAIN_ERRORS = {422: {"model": ErrorResponse, "description": "Argument outside the estimator domain"}}


def _lookup(route_id: str) -> Route:
    try:
        return get_route(route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Route not found: {route_id}")


def _cost_estimator(policy: Optional[str]) -> CostEstimator:
    """Shared estimator, or one with the requested port policy."""
    performance = get_app_state().performance
    if policy is None:
        return performance.cost_estimator
    profile = performance.profile.with_port_fee_policy(PortFeePolicy(policy))
    return CostEstimator(profile.cost)


@router.post("/api/voyage/speed", response_model=SpeedResponse, responses=DOMAIN_ERRORS)
async def calculate_speed(request: SpeedRequest):
    """
    Weather-affected speed at one point.

    Without weather (or with ``weather``/``ocean`` missing) the base
    speed is returned unchanged.
    """
    performance = get_app_state().performance
    base_speed = request.base_speed_kts
    if base_speed is None:
        base_speed = performance.profile.fuel.base_speed_kts
    result = performance.speed_model.calculate(
        base_speed, weather_from_payload(request.weather), request.course_deg,
    )
    return SpeedResponse(**result.to_dict())


@router.post("/api/voyage/fuel", response_model=FuelResponse, responses=DOMAIN_ERRORS)
async def calculate_fuel(request: FuelRequest):
    """Fuel burn at a waypoint and projected remaining fuel."""
    estimator = get_app_state().performance.fuel_estimator
    result = estimator.estimate(
        request.speed_kts,
        weather_from_payload(request.weather),
        request.waypoint_index,
        request.total_waypoints,
        request.base_speed_kts,
    )
    return FuelResponse(**result.to_dict())


@router.post("/api/voyage/cost", response_model=CostResponse, responses=DOMAIN_ERRORS)
async def calculate_cost(request: CostRequest):
    """Remaining voyage cost from a waypoint of a catalog route."""
    route = _lookup(request.route_id)
    estimator = _cost_estimator(request.port_fee_policy)
    result = estimator.estimate(
        route, request.waypoint_index, request.fuel_kg, weather_from_payload(request.weather),
    )
    return CostResponse(**result.to_dict())


@router.post("/api/voyage/travel-time", response_model=TravelTimeResponse, responses=DOMAIN_ERRORS)
async def calculate_leg_time(request: TravelTimeRequest):
    """Time between two points at a constant speed."""
    result = calculate_travel_time(
        (request.start.lat, request.start.lon),
        (request.end.lat, request.end.lon),
        request.speed_kts,
    )
    return TravelTimeResponse(
        distance_km=result.distance_km,
        speed_kmh=result.speed_kmh,
        time_hours=result.time_hours,
        time_minutes=result.time_minutes,
        formatted=result.formatted,
    )


@router.post("/api/voyage/estimate", response_model=EstimateResponse, responses=DOMAIN_ERRORS)
async def estimate_waypoint(request: EstimateRequest):
    """
    Speed, fuel and cost at one waypoint of a catalog route.

    Course is the bearing of the leg leaving the waypoint. When no
    weather is supplied it is fetched for the waypoint.
    """
    route = _lookup(request.route_id)
    total = len(route.waypoints)
    validate_waypoint_index(request.waypoint_index, total)
    waypoint_id = route.waypoint_id(request.waypoint_index)

    sample = weather_from_payload(request.weather)
    if sample is None:
        service = get_app_state().weather_service
        sample = await asyncio.to_thread(
            service.fetch_waypoint_weather, route.waypoints[request.waypoint_index], waypoint_id,
        )

    snapshot = get_app_state().performance.get_snapshot()
    base_speed = request.base_speed_kts
    if base_speed is None:
        base_speed = snapshot['profile'].fuel.base_speed_kts
    course = route.course_at(request.waypoint_index)
    speed = snapshot['speed_model'].calculate(base_speed, sample, course)

    fuel = None
    cost = None
    if sample.has_data:
        fuel = snapshot['fuel_estimator'].estimate(
            speed.sog_kts, sample, request.waypoint_index, total, base_speed,
        )
        cost = _cost_estimator(request.port_fee_policy).estimate(
            route, request.waypoint_index, fuel, sample,
        )
    else:
        logger.info(f"No weather for {waypoint_id}, fuel and cost omitted")

    return EstimateResponse(
        route_id=route.id,
        waypoint_index=request.waypoint_index,
        waypoint_id=waypoint_id,
        course_deg=course,
        weather_source=sample.source,
        speed=SpeedResponse(**speed.to_dict()),
        fuel=FuelResponse(**fuel.to_dict()) if fuel else None,
        cost=CostResponse(**cost.to_dict()) if cost else None,
    )


def _profile_response() -> ProfileResponse:
    profile = get_app_state().performance.profile
    cost = asdict(profile.cost)
    cost["port_fee_policy"] = profile.cost.port_fee_policy.value
    return ProfileResponse(ship=asdict(profile.ship), fuel=asdict(profile.fuel), cost=cost)


@router.get("/api/voyage/profile", response_model=ProfileResponse)
async def get_profile():
    """Current ship, fuel and tariff parameters."""
    return _profile_response()


@router.put("/api/voyage/profile", response_model=ProfileResponse)
async def update_profile(request: ProfileUpdateRequest):
    """Update profile parameters and rebuild the estimators."""
    get_app_state().performance.update_profile(
        ship=request.ship.model_dump(exclude_none=True) if request.ship else None,
        fuel=request.fuel.model_dump(exclude_none=True) if request.fuel else None,
        cost=request.cost.model_dump(exclude_none=True) if request.cost else None,
    )
    return _profile_response()
