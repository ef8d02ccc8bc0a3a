"""
Trade routes API router.

Lists the route catalog, route geometry and whole-route summaries.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query

from api.schemas import (
    DistanceRequest,
    DistanceResponse,
    PortModel,
    Position,
    RouteDetailModel,
    RouteLegModel,
    RouteMetricsResponse,
    RouteSummaryModel,
)
from api.state import get_app_state
from tradelane.performance.route_metrics import estimate_route_metrics
from tradelane.routes import KM_PER_NM, Route, get_route, list_routes, route_distance_km

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["Routes"])


def _lookup(route_id: str) -> Route:
    try:
        return get_route(route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Route not found: {route_id}")


def _summary(route: Route) -> dict:
    return {
        "id": route.id,
        "name": route.name,
        "style": route.style,
        "color": route.color,
        "is_canal_route": route.is_canal_route,
        "waypoint_count": len(route.waypoints),
        "total_distance_km": route.total_distance_km,
    }


@router.get("", response_model=List[RouteSummaryModel])
async def get_routes():
    """All catalog routes."""
    return [RouteSummaryModel(**_summary(route)) for route in list_routes()]


@router.post("/distance", response_model=DistanceResponse)
async def calculate_distance(request: DistanceRequest):
    """Great-circle length of a polyline (sum of its legs)."""
    points = [(p.lat, p.lon) for p in request.points]
    distance_km = route_distance_km(points)
    return DistanceResponse(
        distance_km=distance_km,
        distance_nm=distance_km / KM_PER_NM,
        leg_count=max(0, len(points) - 1),
    )


@router.get("/{route_id}", response_model=RouteDetailModel)
async def get_route_detail(route_id: str):
    """Route waypoints, ports and legs with bearings."""
    route = _lookup(route_id)
    return RouteDetailModel(
        **_summary(route),
        waypoints=[Position(lat=lat, lon=lon) for lat, lon in route.waypoints],
        ports=[
            PortModel(
                name=port.name,
                lat=port.position[0],
                lon=port.position[1],
                port_type=port.port_type,
                waypoint_index=route.port_waypoint_index(port),
            )
            for port in route.ports
        ],
        legs=[
            RouteLegModel(
                index=leg.index,
                start=Position(lat=leg.start[0], lon=leg.start[1]),
                end=Position(lat=leg.end[0], lon=leg.end[1]),
                distance_km=leg.distance_km,
                bearing_deg=leg.bearing_deg,
            )
            for leg in route.legs
        ],
    )


@router.get("/{route_id}/metrics", response_model=RouteMetricsResponse)
async def get_route_metrics(
    route_id: str,
    base_speed_kts: float = Query(20.0, gt=0, le=40),
    use_weather: bool = Query(True, description="Average fetched waypoint weather"),
):
    """
    Distance, travel time and fuel summary for a route.

    Without weather the summary assumes moderate average conditions.
    """
    route = _lookup(route_id)
    table = None
    if use_weather:
        table = await get_app_state().weather_service.fetch_route_weather(route.waypoints, route.id)
    metrics = estimate_route_metrics(route, table, base_speed_kts)
    logger.debug(f"Metrics for {route.id}: {metrics.waypoints_with_data} waypoints with weather")
    return RouteMetricsResponse(**metrics.to_dict())
