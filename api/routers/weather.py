"""
Waypoint weather API router.

Serves live (or synthetic fallback) weather for single points and for
every waypoint of a catalog route.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.schemas import RouteWeatherResponse, WaypointWeatherResponse, WeatherPayload
from api.state import get_app_state
from tradelane.data.weather_client import weather_icon
from tradelane.data.weather_models import WaypointWeather
from tradelane.routes import direction_name, get_route, wind_arrow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Weather"])


def weather_from_payload(payload: Optional[WeatherPayload]) -> Optional[WaypointWeather]:
    """Client-supplied weather as a WaypointWeather (None when absent)."""
    if payload is None:
        return None
    return WaypointWeather.from_dict({
        "weather": payload.weather,
        "ocean": payload.ocean,
        "source": "client",
    })


def waypoint_weather_response(sample: WaypointWeather) -> WaypointWeatherResponse:
    data = sample.to_dict()
    if sample.weather is not None:
        data["wind_direction_name"] = direction_name(sample.weather.wind_dir_deg)
        data["wind_arrow"] = wind_arrow(sample.weather.wind_dir_deg)
        data["icon"] = weather_icon(sample.weather.icon)
    return WaypointWeatherResponse(**data)


@router.get("/api/weather/waypoint", response_model=WaypointWeatherResponse)
async def get_waypoint_weather(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    waypoint_id: Optional[str] = Query(None, max_length=100),
):
    """
    Weather and simulated ocean conditions at a point.

    Falls back to synthetic data when the provider is unavailable.
    """
    service = get_app_state().weather_service
    sample = await asyncio.to_thread(service.fetch_waypoint_weather, (lat, lon), waypoint_id)
    return waypoint_weather_response(sample)


@router.get("/api/weather/route/{route_id}", response_model=RouteWeatherResponse)
async def get_route_weather(route_id: str):
    """Weather for every waypoint of a route, fetched concurrently."""
    try:
        route = get_route(route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Route not found: {route_id}")

    service = get_app_state().weather_service
    table = await service.fetch_route_weather(route.waypoints, route.id)
    missing = sum(1 for sample in table.values() if not sample.has_data)
    if missing:
        logger.warning(f"Route {route.id}: {missing} of {len(table)} waypoints without weather")

    return RouteWeatherResponse(
        route_id=route.id,
        waypoint_count=len(table),
        waypoints={key: waypoint_weather_response(sample) for key, sample in table.items()},
    )
