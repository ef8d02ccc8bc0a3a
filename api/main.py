"""
FastAPI Backend for TRADELANE.

Provides REST API endpoints for:
- Trade route catalog and geometry
- Waypoint weather (live with synthetic fallback)
- Weather-affected speed, fuel and cost estimation
- Voyage simulation along a route
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from api.config import settings
from api.middleware import get_request_id, setup_middleware, structured_logger
from api.routers import routes, simulation, system, voyage, weather
from api.state import get_app_state
from tradelane import __version__
from tradelane.validation import InvalidInputError

# Configure structured logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(message)s',  # JSON logs are self-contained
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory for the TRADELANE API.

    Creates and configures the FastAPI application with middleware,
    exception handlers and routers.

    Returns:
        FastAPI: Configured application instance
    """
    application = FastAPI(
        title="TRADELANE API",
        description="""
## Weather-Aware Voyage Estimation API

Speed, fuel and cost estimates for ships sailing fixed trade routes
under waypoint weather.

### Features
- Route catalog with great-circle geometry
- Waypoint weather with synthetic fallback
- Weather-affected SOG/STW, power and fuel increase
- Remaining fuel and voyage cost per waypoint
- Voyage simulation
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    setup_middleware(
        application,
        debug=settings.debug or settings.is_development,
        enable_hsts=settings.is_production,
    )

    # Origins come from configuration, never a wildcard
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods_list,
        allow_headers=settings.cors_headers_list,
    )

    @application.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        structured_logger.warning(
            "Invalid input",
            path=request.url.path,
            field=exc.field,
            reason=exc.reason,
        )
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "field": exc.field,
                "value": repr(exc.value),
                "request_id": get_request_id(),
            },
        )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})

    application.include_router(system.router)
    application.include_router(routes.router)
    application.include_router(weather.router)
    application.include_router(voyage.router)
    application.include_router(simulation.router)

    return application


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without non-serializable context objects."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg", "input")}
        for error in exc.errors()
    ]


# Create the application
app = create_app()

# Initialize application state (thread-safe singleton)
_ = get_app_state()


# ============================================================================
# Run Server
# ============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
