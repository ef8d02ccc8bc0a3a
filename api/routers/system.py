"""
System API router.

Root info and health check.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from api.middleware import get_request_id
from api.state import get_app_state
from tradelane import __version__
from tradelane.resilience import get_all_circuit_breaker_status
from tradelane.routes.catalog import list_routes

router = APIRouter(tags=["System"])


@router.get("/")
async def root():
    """Service name, version, catalog route ids and endpoint groups."""
    return {
        "name": "TRADELANE API",
        "version": __version__,
        "status": "operational",
        "docs": "/api/docs",
        "routes": [route.id for route in list_routes()],
        "endpoints": {
            "health": "/api/health",
            "catalog": "/api/routes/...",
            "weather": "/api/weather/...",
            "voyage": "/api/voyage/...",
            "simulation": "/api/simulation/...",
        },
    }


@router.get("/api/health")
async def health_check():
    """
    Health check for load balancers.

    ``degraded`` means the weather provider circuit is open and
    synthetic weather is being served.
    """
    components = get_app_state().health_check()
    status = "degraded" if components["weather_service"] == "degraded" else "healthy"
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "components": components,
        "circuit_breakers": get_all_circuit_breaker_status(),
        "request_id": get_request_id(),
    }
