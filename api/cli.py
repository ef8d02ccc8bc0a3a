#!/usr/bin/env python3
"""
TRADELANE CLI Tool.

Command-line interface for:
- Listing the route catalog
- Sampling waypoint weather
- Running a paced voyage simulation in the terminal
- Checking a running API

Usage:
    python -m api.cli list-routes
    python -m api.cli weather --lat 36.14 --lon -5.35
    python -m api.cli simulate route2 --speed 18 --interval 0.5
    python -m api.cli check-health
"""
import argparse
import asyncio
import sys
from dataclasses import replace
from typing import Optional

from tradelane.config import settings
from tradelane.data.weather_client import WeatherService
from tradelane.routes import direction_name, format_hours, get_route, list_routes
from tradelane.simulation import SimulationStep, VoyageSimulator
from tradelane.validation import InvalidInputError


def list_routes_cmd() -> None:
    """Print the route catalog."""
    print(f"\n{'ID':<10} {'Name':<45} {'Waypoints':>9} {'Distance':>12}")
    print("-" * 80)
    for route in list_routes():
        canal = " (canal)" if route.is_canal_route else ""
        print(
            f"{route.id:<10} {route.name:<45} {len(route.waypoints):>9} "
            f"{route.total_distance_km:>9.0f} km{canal}"
        )


def weather_cmd(lat: float, lon: float, seed: Optional[int] = None) -> None:
    """Print weather at a point."""
    service = WeatherService.from_settings(_with_seed(seed))
    try:
        sample = service.fetch_waypoint_weather((lat, lon))
    except InvalidInputError as e:
        print(f"\nError: {e}")
        sys.exit(1)
    weather, ocean = sample.weather, sample.ocean

    print(f"\nWeather at ({lat:.4f}, {lon:.4f}) [{sample.source}]")
    print(f"  Wind:    {weather.wind_speed_ms:.1f} m/s from {direction_name(weather.wind_dir_deg)}")
    print(f"  Temp:    {weather.temperature_c:.1f} °C, {weather.condition}")
    print(f"  Waves:   {ocean.wave_height_m:.2f} m")
    print(f"  Swell:   {ocean.swell_height_m:.2f} m toward {ocean.swell_dir_deg:.0f}°")
    print(f"  Current: {ocean.current_speed_kts:.2f} kts toward {ocean.current_dir_deg:.0f}°")


def _with_seed(seed: Optional[int]):
    return settings if seed is None else replace(settings, weather_fallback_seed=seed)


def _print_step(step: SimulationStep) -> None:
    line = (
        f"[{step.progress_pct:5.1f}%] {step.waypoint_id:<20} "
        f"course {step.course_deg:6.1f}°  SOG {step.sog_kts:5.2f} kts"
    )
    if step.fuel is not None and step.cost is not None:
        line += f"  fuel {step.fuel.current_kgh:7.0f} kg/h  cost ${step.cost.total:,.0f}"
    print(line)


def simulate(route_id: str, speed: float, interval: float, seed: Optional[int] = None) -> None:
    """Run a paced simulation, printing each waypoint."""
    try:
        route = get_route(route_id)
    except KeyError:
        print(f"\nError: unknown route '{route_id}'")
        sys.exit(1)

    service = WeatherService.from_settings(_with_seed(seed))
    try:
        simulator = VoyageSimulator(
            route, service, base_speed_kts=speed, step_interval_s=interval,
        )
    except InvalidInputError as e:
        print(f"\nError: {e}")
        sys.exit(1)

    print(f"\nSimulating {route.name} at {speed} kts...\n")
    try:
        result = asyncio.run(simulator.run(on_step=_print_step))
    except KeyboardInterrupt:
        print("\nSimulation interrupted")
        sys.exit(130)

    status = "completed" if result.completed else "stopped"
    print(f"\nSimulation {status}: {format_hours(result.total_time_hours)} at sea")


def check_health(url: str) -> None:
    """Check API health."""
    import requests

    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            data = response.json()
            print(f"\nAPI Status: {data.get('status', 'unknown')}")
            print(f"Version: {data.get('version', 'unknown')}")
            print(f"Timestamp: {data.get('timestamp', 'unknown')}")
        else:
            print(f"\nAPI returned status code: {response.status_code}")
            sys.exit(1)
    except requests.exceptions.ConnectionError:
        print("\nError: Could not connect to API. Is the server running?")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        print(f"\nError: {e}")
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TRADELANE CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  List routes:
    python -m api.cli list-routes

  Weather at Gibraltar (reproducible fallback data):
    python -m api.cli weather --lat 36.14 --lon -5.35 --seed 7

  Simulate the Suez route at 18 knots, one waypoint per half second:
    python -m api.cli simulate route2 --speed 18 --interval 0.5

  Check API health:
    python -m api.cli check-health
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list-routes", help="List catalog routes")

    weather_parser = subparsers.add_parser("weather", help="Weather at a point")
    weather_parser.add_argument("--lat", type=float, required=True, help="Latitude (deg)")
    weather_parser.add_argument("--lon", type=float, required=True, help="Longitude (deg)")
    weather_parser.add_argument("--seed", type=int, help="Seed for synthetic fallback data")

    sim_parser = subparsers.add_parser("simulate", help="Simulate a voyage")
    sim_parser.add_argument("route_id", help="Route id, e.g. route1")
    sim_parser.add_argument(
        "--speed",
        type=float,
        default=settings.sim_base_speed_kts,
        help=f"Base speed in knots (default: {settings.sim_base_speed_kts})"
    )
    sim_parser.add_argument(
        "--interval",
        type=float,
        default=settings.sim_step_interval_s,
        help=f"Seconds between waypoints (default: {settings.sim_step_interval_s})"
    )
    sim_parser.add_argument("--seed", type=int, help="Seed for synthetic fallback data")

    health_parser = subparsers.add_parser("check-health", help="Check API health")
    health_parser.add_argument(
        "--url",
        default="http://localhost:8000/api/health",
        help="Health endpoint URL"
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings.configure_logging()

    if args.command == "list-routes":
        list_routes_cmd()
    elif args.command == "weather":
        weather_cmd(args.lat, args.lon, args.seed)
    elif args.command == "simulate":
        simulate(args.route_id, args.speed, args.interval, args.seed)
    elif args.command == "check-health":
        check_health(args.url)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
