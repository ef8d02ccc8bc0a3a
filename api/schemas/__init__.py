"""
TRADELANE API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import Position, SpeedRequest, ...
"""

# Common
from .common import ErrorResponse, PortFeePolicyName, Position  # noqa: F401

# Weather
from .weather import (  # noqa: F401
    OceanSnapshotModel,
    RouteWeatherResponse,
    WaypointWeatherResponse,
    WeatherPayload,
    WeatherSnapshotModel,
)

# Routes
from .routes import (  # noqa: F401
    DistanceRequest,
    DistanceResponse,
    PortModel,
    RouteDetailModel,
    RouteLegModel,
    RouteMetricsResponse,
    RouteSummaryModel,
)

# Voyage
from .voyage import (  # noqa: F401
    CostBreakdownModel,
    CostRequest,
    CostResponse,
    CostScheduleUpdate,
    EstimateRequest,
    EstimateResponse,
    FuelModelUpdate,
    FuelRequest,
    FuelResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ResistanceFactorModel,
    ShipProfileUpdate,
    SpeedRequest,
    SpeedResponse,
    TravelTimeRequest,
    TravelTimeResponse,
)

# Simulation
from .simulation import (  # noqa: F401
    SimulationRequest,
    SimulationResponse,
    SimulationStepModel,
)
