"""
Voyage simulation API router.

Runs the waypoint stepper over a whole route in one request (no
wall-clock pacing) and returns every step.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.routers.weather import weather_from_payload
from api.schemas import (
    CostResponse,
    FuelResponse,
    SimulationRequest,
    SimulationResponse,
    SimulationStepModel,
)
from api.state import get_app_state
from tradelane.performance.cost import CostEstimator
from tradelane.performance.profile import PortFeePolicy
from tradelane.routes import format_hours, get_route
from tradelane.simulation import SimulationStep, VoyageSimulator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Simulation"])


def _step_model(step: SimulationStep) -> SimulationStepModel:
    return SimulationStepModel(
        index=step.index,
        waypoint_id=step.waypoint_id,
        lat=step.position[0],
        lon=step.position[1],
        course_deg=step.course_deg,
        progress_pct=step.progress_pct,
        sog_kts=step.speed.sog_kts,
        stw_kts=step.speed.stw_kts,
        has_weather=step.weather is not None,
        fuel=FuelResponse(**step.fuel.to_dict()) if step.fuel else None,
        cost=CostResponse(**step.cost.to_dict()) if step.cost else None,
        segment_hours=step.segment.time_hours if step.segment else None,
        elapsed_hours=step.elapsed_hours,
    )


@router.post("/api/simulation/{route_id}/run", response_model=SimulationResponse)
async def run_simulation(route_id: str, request: Optional[SimulationRequest] = None):
    """
    Simulate a voyage along a catalog route.

    Weather is fetched for all waypoints first (concurrently) unless
    supplied in the request.
    """
    try:
        route = get_route(route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Route not found: {route_id}")

    request = request or SimulationRequest()

    state = get_app_state()
    performance = state.performance.get_snapshot()

    cost_estimator = performance['cost_estimator']
    if request.port_fee_policy is not None:
        profile = performance['profile'].with_port_fee_policy(PortFeePolicy(request.port_fee_policy))
        cost_estimator = CostEstimator(profile.cost)

    base_speed = request.base_speed_kts
    if base_speed is None:
        base_speed = performance['profile'].fuel.base_speed_kts

    simulator = VoyageSimulator(
        route,
        state.weather_service,
        speed_model=performance['speed_model'],
        fuel_estimator=performance['fuel_estimator'],
        cost_estimator=cost_estimator,
        base_speed_kts=base_speed,
        step_interval_s=0,
    )

    if request.weather is not None:
        simulator.weather_table = {
            key: weather_from_payload(payload) for key, payload in request.weather.items()
        }
    else:
        await simulator.prefetch_weather()

    steps = list(simulator.iter_steps())
    total_hours = steps[-1].elapsed_hours if steps else 0.0
    logger.info(f"Simulated {route.id}: {len(steps)} steps, {total_hours:.1f} h")

    return SimulationResponse(
        route_id=route.id,
        route_name=route.name,
        completed=len(steps) == len(route.waypoints),
        total_time_hours=total_hours,
        total_time_formatted=format_hours(total_hours),
        steps=[_step_model(step) for step in steps],
    )
