"""
Thread-safe state management for the TRADELANE API.

Holds the performance profile, the estimators built from it and the
weather service. Estimators are immutable once built; updating the
profile swaps in a new set atomically.
"""
import threading
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tradelane.config import settings as core_settings
from tradelane.data.weather_client import WeatherService
from tradelane.performance.cost import CostEstimator
from tradelane.performance.fuel import FuelEstimator
from tradelane.performance.profile import PerformanceProfile, PortFeePolicy
from tradelane.performance.speed_model import WeatherSpeedModel

logger = logging.getLogger(__name__)


def default_profile() -> PerformanceProfile:
    """Profile seeded from the core settings."""
    return (
        PerformanceProfile()
        .with_base_speed(core_settings.sim_base_speed_kts)
        .with_port_fee_policy(PortFeePolicy(core_settings.sim_port_fee_policy))
    )


@dataclass
class PerformanceState:
    """
    Thread-safe container for the performance profile and estimators.

    Uses a lock so readers never see a speed model built from one
    profile next to a cost estimator built from another.
    """
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    _profile: Optional[PerformanceProfile] = None
    _speed_model: Optional[WeatherSpeedModel] = None
    _fuel_estimator: Optional[FuelEstimator] = None
    _cost_estimator: Optional[CostEstimator] = None

    def __post_init__(self):
        self._rebuild(self._profile or default_profile())

    def _rebuild(self, profile: PerformanceProfile):
        self._profile = profile
        self._speed_model = WeatherSpeedModel(profile.ship)
        self._fuel_estimator = FuelEstimator(profile.fuel)
        self._cost_estimator = CostEstimator(profile.cost)

    @property
    def profile(self) -> PerformanceProfile:
        with self._lock:
            return self._profile

    @property
    def speed_model(self) -> WeatherSpeedModel:
        with self._lock:
            return self._speed_model

    @property
    def fuel_estimator(self) -> FuelEstimator:
        with self._lock:
            return self._fuel_estimator

    @property
    def cost_estimator(self) -> CostEstimator:
        with self._lock:
            return self._cost_estimator

    def update_profile(
        self,
        ship: Optional[Dict[str, Any]] = None,
        fuel: Optional[Dict[str, Any]] = None,
        cost: Optional[Dict[str, Any]] = None,
    ) -> PerformanceProfile:
        """
        Replace profile fields atomically and rebuild the estimators.

        Args:
            ship: ShipProfile fields to override
            fuel: FuelModelConfig fields to override
            cost: CostSchedule fields to override

        Returns:
            The new profile
        """
        with self._lock:
            profile = self._profile
            if ship:
                profile = replace(profile, ship=replace(profile.ship, **ship))
            if fuel:
                profile = replace(profile, fuel=replace(profile.fuel, **fuel))
            if cost:
                if "port_fee_policy" in cost:
                    cost = dict(cost, port_fee_policy=PortFeePolicy(cost["port_fee_policy"]))
                profile = replace(profile, cost=replace(profile.cost, **cost))
            self._rebuild(profile)

            logger.info(
                f"Performance profile updated: base speed {profile.fuel.base_speed_kts} kts, "
                f"port policy {profile.cost.port_fee_policy.value}"
            )
            return profile

    def reset(self) -> None:
        with self._lock:
            self._rebuild(default_profile())

    def get_snapshot(self) -> Dict[str, Any]:
        """
        Get a consistent set of estimators for one request.

        Returns a copy that can be used without holding the lock.
        """
        with self._lock:
            return {
                'profile': self._profile,
                'speed_model': self._speed_model,
                'fuel_estimator': self._fuel_estimator,
                'cost_estimator': self._cost_estimator,
            }


class ApplicationState:
    """
    Singleton application state manager.

    Use get_app_state() to access the singleton instance.
    """

    _instance: Optional['ApplicationState'] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls):
        """Ensure singleton pattern."""
        if cls._instance is None:
            with cls._lock:
                # Double-check locking
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize application state (only once)."""
        if self._initialized:
            return

        self._initialized = True
        self._performance = PerformanceState()
        self._weather_service: Optional[WeatherService] = None
        self._weather_lock = threading.Lock()
        self._startup_time = datetime.now(timezone.utc)

        logger.info("Application state initialized")

    @property
    def performance(self) -> PerformanceState:
        return self._performance

    @property
    def weather_service(self) -> WeatherService:
        """Weather service (lazy initialization)."""
        with self._weather_lock:
            if self._weather_service is None:
                self._weather_service = WeatherService.from_settings(core_settings)
                logger.info("Weather service initialized")
            return self._weather_service

    def set_weather_service(self, service: WeatherService) -> None:
        """Swap the weather service (tests, alternate providers)."""
        with self._weather_lock:
            self._weather_service = service

    @property
    def uptime_seconds(self) -> float:
        """Get application uptime in seconds."""
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    def health_check(self) -> Dict[str, Any]:
        """
        Health of each component.

        Returns:
            Dict with health status of each component
        """
        service = self._weather_service
        if service is None:
            weather = 'not_initialized'
        elif service.client is None:
            weather = 'synthetic'
        elif service.client.breaker.is_open:
            weather = 'degraded'
        else:
            weather = 'healthy'
        return {
            'performance': 'healthy' if self._performance.profile is not None else 'unhealthy',
            'weather_service': weather,
            'uptime_seconds': self.uptime_seconds,
        }


def get_app_state() -> ApplicationState:
    """
    Get the application state singleton.

    Returns:
        ApplicationState: The singleton application state instance
    """
    return ApplicationState()
