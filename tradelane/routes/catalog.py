"""
Static trade route table.

Routes are created once at import time and never mutated. Waypoints
are (lat, lon) pairs in decimal degrees, ordered from origin to
destination.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from tradelane.routes.geo import Coordinate, calculate_bearing, haversine_km, route_distance_km

logger = logging.getLogger(__name__)

CANAL_ROUTE_STYLE = "dashed"


@dataclass(frozen=True)
class Port:
    """A named port marker along a route."""
    name: str
    position: Coordinate
    port_type: str = "major"  # 'major' or 'minor'

    @property
    def is_major(self) -> bool:
        return self.port_type == "major"


@dataclass(frozen=True)
class RouteLeg:
    """A leg between two consecutive waypoints."""
    index: int
    start: Coordinate
    end: Coordinate
    distance_km: float
    bearing_deg: float


@dataclass(frozen=True)
class Route:
    """A complete trade route with waypoints and port markers."""
    id: str
    name: str
    waypoints: Tuple[Coordinate, ...]
    ports: Tuple[Port, ...]
    style: str = "solid"
    color: str = "#217A8A"

    @property
    def is_canal_route(self) -> bool:
        """Dashed routes transit a canal and pay canal fees."""
        return self.style == CANAL_ROUTE_STYLE

    @property
    def total_distance_km(self) -> float:
        return route_distance_km(self.waypoints)

    @property
    def legs(self) -> List[RouteLeg]:
        """Calculate legs between waypoints."""
        legs = []
        for i, (start, end) in enumerate(zip(self.waypoints, self.waypoints[1:])):
            legs.append(RouteLeg(
                index=i,
                start=start,
                end=end,
                distance_km=haversine_km(start[0], start[1], end[0], end[1]),
                bearing_deg=calculate_bearing(start[0], start[1], end[0], end[1]),
            ))
        return legs

    def course_at(self, index: int) -> float:
        """
        Course sailed from a waypoint: initial bearing of the leg leaving it.

        The last waypoint keeps the previous leg's course; a single-point
        route has course 0.
        """
        if len(self.waypoints) < 2:
            return 0.0
        i = min(index, len(self.waypoints) - 2)
        (lat1, lon1), (lat2, lon2) = self.waypoints[i], self.waypoints[i + 1]
        return calculate_bearing(lat1, lon1, lat2, lon2)

    def waypoint_id(self, index: int) -> str:
        """Key under which a waypoint's weather is stored."""
        return f"{self.id}-waypoint-{index}"

    def port_waypoint_index(self, port: Port) -> int:
        """Index of the route waypoint nearest to the port marker."""
        distances = [
            haversine_km(port.position[0], port.position[1], lat, lon)
            for lat, lon in self.waypoints
        ]
        return min(range(len(distances)), key=distances.__getitem__)

    def major_ports_after(self, waypoint_index: int) -> List[Port]:
        """Major ports located strictly beyond the given waypoint."""
        return [
            port for port in self.ports
            if port.is_major and self.port_waypoint_index(port) > waypoint_index
        ]


ROUTES: Tuple[Route, ...] = (
    Route(
        id="route1",
        name="Alexandria to New York (Atlantic Route)",
        waypoints=(
            # Alexandria, Egypt
            (31.2001, 29.9187),
            # Mediterranean Sea
            (31.5, 30.2), (32.0, 31.0), (32.8, 32.5), (33.5, 33.8), (34.2, 34.9),
            # Gibraltar Strait
            (36.1408, -5.3536),
            # Atlantic Ocean - European coast
            (36.5, -6.5), (37.2, -8.1), (38.7, -9.4), (40.6, -8.9),
            # Lisbon, Portugal
            (38.7223, -9.1393),
            # Atlantic crossing
            (39.0, -12.0), (40.0, -15.0), (41.0, -20.0), (42.0, -25.0),
            (43.0, -30.0), (44.0, -35.0), (45.0, -40.0), (46.0, -45.0),
            (47.0, -50.0), (46.5, -55.0), (45.5, -60.0), (44.0, -65.0),
            (42.5, -68.0), (41.0, -70.0), (40.0, -72.0),
            # New York, USA
            (40.7128, -74.0060),
        ),
        ports=(
            Port("Alexandria", (31.2001, 29.9187), "major"),
            Port("Gibraltar", (36.1408, -5.3536), "minor"),
            Port("Lisbon", (38.7223, -9.1393), "major"),
            Port("New York", (40.7128, -74.0060), "major"),
        ),
        style="solid",
        color="#FF4444",
    ),
    Route(
        id="route2",
        name="Alexandria to Singapore (Suez Route)",
        waypoints=(
            # Alexandria, Egypt
            (31.2001, 29.9187),
            # Suez Canal
            (30.8025, 32.2735), (30.5944, 32.2631), (30.0444, 31.2357),
            # Red Sea
            (27.2583, 33.8116), (25.0, 35.0), (22.0, 36.5), (20.0, 37.5),
            (18.0, 38.8), (16.0, 40.0), (14.0, 41.5), (12.6302, 43.1462),
            # Aden, Yemen
            (12.7797, 45.0369),
            # Arabian Sea
            (12.0, 48.0), (11.5, 52.0), (12.0, 56.0), (13.0, 60.0),
            (15.0, 64.0), (17.0, 68.0), (18.9750, 72.8258),
            # Mumbai, India
            (19.0760, 72.8777),
            # Indian Ocean
            (18.0, 75.0), (16.0, 78.0), (14.0, 82.0), (12.0, 86.0),
            (10.0, 90.0), (8.0, 94.0), (6.0, 98.0), (4.0, 101.0),
            (2.0, 103.0),
            # Singapore
            (1.3521, 103.8198),
        ),
        ports=(
            Port("Alexandria", (31.2001, 29.9187), "major"),
            Port("Suez", (30.0444, 31.2357), "minor"),
            Port("Aden", (12.7797, 45.0369), "minor"),
            Port("Mumbai", (19.0760, 72.8777), "major"),
            Port("Singapore", (1.3521, 103.8198), "major"),
        ),
        style=CANAL_ROUTE_STYLE,
        color="#4444FF",
    ),
)

_ROUTES_BY_ID: Dict[str, Route] = {route.id: route for route in ROUTES}


def list_routes() -> List[Route]:
    """All routes in table order."""
    return list(ROUTES)


def get_route(route_id: str) -> Route:
    """
    Look up a route by id.

    Raises:
        KeyError: If no route has this id
    """
    try:
        return _ROUTES_BY_ID[route_id]
    except KeyError:
        logger.warning(f"Unknown route id requested: {route_id!r}")
        raise KeyError(f"Unknown route: {route_id}") from None
