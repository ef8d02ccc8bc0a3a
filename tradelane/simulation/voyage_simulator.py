"""
Waypoint-by-waypoint voyage simulator.

Steps a ship along a route: at each waypoint the weather-affected
speed, fuel consumption and remaining cost are evaluated, and the
time to the next waypoint is taken at the weather-affected SOG.

Weather for the whole route is fetched up front, concurrently; no step
is computed before the fetch completes.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, List, Optional

from tradelane.data.weather_models import WaypointWeather, coerce_waypoint_weather
from tradelane.performance.cost import CostEstimator, RouteCost
from tradelane.performance.fuel import FuelConsumption, FuelEstimator
from tradelane.performance.speed_model import SpeedResult, WeatherSpeedModel
from tradelane.routes.catalog import Route
from tradelane.routes.geo import Coordinate, TravelTime, calculate_travel_time
from tradelane.validation import InvalidInputError, validate_speed, validate_waypoint_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationStep:
    """State of the ship at one waypoint."""
    index: int
    waypoint_id: str
    position: Coordinate
    course_deg: float
    progress_pct: float
    speed: SpeedResult
    weather: Optional[WaypointWeather] = None
    fuel: Optional[FuelConsumption] = None
    cost: Optional[RouteCost] = None
    segment: Optional[TravelTime] = None  # To the next waypoint; None at the last
    elapsed_hours: float = 0.0  # Voyage time up to and including this segment

    @property
    def sog_kts(self) -> float:
        return self.speed.sog_kts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "waypoint_id": self.waypoint_id,
            "position": list(self.position),
            "course_deg": self.course_deg,
            "progress_pct": self.progress_pct,
            "speed": self.speed.to_dict(),
            "weather": self.weather.to_dict() if self.weather else None,
            "fuel": self.fuel.to_dict() if self.fuel else None,
            "cost": self.cost.to_dict() if self.cost else None,
            "segment_hours": self.segment.time_hours if self.segment else None,
            "elapsed_hours": self.elapsed_hours,
        }


@dataclass
class SimulationResult:
    route_id: str
    steps: List[SimulationStep] = field(default_factory=list)
    total_time_hours: float = 0.0
    completed: bool = False


class VoyageSimulator:
    """
    Simulate a voyage along a route.

    Args:
        route: Route to sail
        weather_source: Object with an async
            ``fetch_route_weather(waypoints, route_id)`` method
        speed_model: Weather speed model (default ship)
        fuel_estimator: Fuel estimator (default table)
        cost_estimator: Cost estimator (default tariff)
        base_speed_kts: Calm-water service speed, must be > 0
        step_interval_s: Wall-clock pause between steps in ``run``
    """

    def __init__(
        self,
        route: Route,
        weather_source: Any,
        speed_model: Optional[WeatherSpeedModel] = None,
        fuel_estimator: Optional[FuelEstimator] = None,
        cost_estimator: Optional[CostEstimator] = None,
        base_speed_kts: float = 20.0,
        step_interval_s: float = 2.0,
    ):
        if not route.waypoints:
            raise InvalidInputError("route", route.id, "has no waypoints")
        if step_interval_s < 0:
            raise InvalidInputError("step_interval_s", step_interval_s, "must not be negative")

        self.route = route
        self.weather_source = weather_source
        self.speed_model = speed_model or WeatherSpeedModel()
        self.fuel_estimator = fuel_estimator or FuelEstimator()
        self.cost_estimator = cost_estimator or CostEstimator()
        self.base_speed_kts = validate_speed(base_speed_kts, "base_speed_kts")
        self.step_interval_s = step_interval_s

        self.weather_table: Optional[Dict[str, WaypointWeather]] = None
        # Created per run so it binds to the running loop
        self._stop_event: Optional[asyncio.Event] = None
        self._stop_requested = False
        self._halted = False

    @property
    def total_waypoints(self) -> int:
        return len(self.route.waypoints)

    async def prefetch_weather(self) -> Dict[str, WaypointWeather]:
        """Fetch weather for every waypoint concurrently and keep it."""
        self.weather_table = await self.weather_source.fetch_route_weather(
            self.route.waypoints, self.route.id,
        )
        return self.weather_table

    def compute_step(
        self,
        index: int,
        weather_table: Optional[Dict[str, Any]] = None,
    ) -> SimulationStep:
        """
        Evaluate one waypoint.

        Args:
            index: Waypoint index
            weather_table: Weather keyed by waypoint id; defaults to the
                prefetched table

        Returns:
            SimulationStep (``elapsed_hours`` is left at 0)
        """
        total = self.total_waypoints
        validate_waypoint_index(index, total)
        table = self.weather_table if weather_table is None else weather_table
        table = table or {}

        waypoint_id = self.route.waypoint_id(index)
        sample = coerce_waypoint_weather(table.get(waypoint_id))
        course = self.route.course_at(index)
        progress = index / (total - 1) * 100 if total > 1 else 100.0

        speed = self.speed_model.calculate(self.base_speed_kts, sample, course)

        fuel = None
        cost = None
        if sample is not None and sample.has_data:
            fuel = self.fuel_estimator.estimate(
                speed.sog_kts, sample, index, total, self.base_speed_kts,
            )
            cost = self.cost_estimator.estimate(self.route, index, fuel, sample)
        else:
            logger.warning(f"Missing weather data for {waypoint_id}, using base speed")
            sample = None

        segment = None
        if index < total - 1:
            # A stopped ship cannot cover the leg; time it at service speed
            leg_speed = speed.sog_kts or self.base_speed_kts
            segment = calculate_travel_time(
                self.route.waypoints[index], self.route.waypoints[index + 1], leg_speed,
            )

        return SimulationStep(
            index=index,
            waypoint_id=waypoint_id,
            position=self.route.waypoints[index],
            course_deg=course,
            progress_pct=progress,
            speed=speed,
            weather=sample,
            fuel=fuel,
            cost=cost,
            segment=segment,
        )

    def iter_steps(self) -> Iterator[SimulationStep]:
        """
        Yield every step in order with cumulative voyage time.

        Raises:
            RuntimeError: If weather has not been prefetched
        """
        if self.weather_table is None:
            raise RuntimeError("Weather not loaded; await prefetch_weather() first")

        elapsed = 0.0
        for index in range(self.total_waypoints):
            step = self.compute_step(index)
            if step.segment is not None:
                elapsed += step.segment.time_hours
            yield replace(step, elapsed_hours=elapsed)

    def stop(self):
        """
        Request the simulation to stop before its next step.

        A stop requested before ``run`` makes that run return without
        emitting any step.
        """
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    @property
    def stopped(self) -> bool:
        """True while a stop is pending or when the last run was stopped."""
        return self._stop_requested or self._halted

    async def _wait_interval(self) -> bool:
        """Pause between steps; True if a stop was requested meanwhile."""
        if self.step_interval_s <= 0:
            await asyncio.sleep(0)
            return self._stop_event.is_set()
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.step_interval_s)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(
        self,
        on_step: Optional[Callable[[SimulationStep], Any]] = None,
    ) -> SimulationResult:
        """
        Run the simulation in real time.

        The first waypoint is emitted as soon as weather is loaded, then
        one waypoint per ``step_interval_s`` until the destination or
        ``stop()``.

        Args:
            on_step: Called with each step; may be a coroutine function
        """
        self._stop_event = asyncio.Event()
        self._halted = False
        if self._stop_requested:
            self._stop_event.set()
        try:
            return await self._run(on_step)
        finally:
            self._halted = self._stop_event.is_set()
            self._stop_requested = False
            self._stop_event = None

    async def _run(self, on_step) -> SimulationResult:
        result = SimulationResult(route_id=self.route.id)
        if self._stop_event.is_set():
            logger.info(f"Simulation for route {self.route.name} stopped before start")
            return result

        logger.info(f"Starting simulation for route: {self.route.name}")
        await self.prefetch_weather()

        for step in self.iter_steps():
            if step.index > 0 and await self._wait_interval():
                break
            if self._stop_event.is_set():
                break

            result.steps.append(step)
            result.total_time_hours = step.elapsed_hours
            logger.info(
                f"Simulation step: waypoint {step.index}/{self.total_waypoints}, "
                f"progress: {step.progress_pct:.1f}%, SOG {step.sog_kts:.2f} kts"
            )

            if on_step is not None:
                outcome = on_step(step)
                if inspect.isawaitable(outcome):
                    await outcome

        result.completed = len(result.steps) == self.total_waypoints
        if result.completed:
            logger.info(f"Simulation completed: {result.total_time_hours:.1f} h")
        else:
            logger.info(f"Simulation stopped at waypoint {len(result.steps) - 1}")
        return result
