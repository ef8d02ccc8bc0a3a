"""Tests for the static route catalog."""

import pytest

from tradelane.routes import ROUTES, get_route, list_routes
from tradelane.routes.geo import calculate_bearing


class TestCatalog:

    def test_list_routes_in_table_order(self):
        ids = [route.id for route in list_routes()]
        assert ids == ["route1", "route2"]

    def test_get_route(self):
        route = get_route("route2")
        assert route.name == "Alexandria to Singapore (Suez Route)"

    def test_unknown_route_raises_key_error(self):
        with pytest.raises(KeyError):
            get_route("route99")

    def test_only_suez_route_is_canal(self, atlantic_route, suez_route):
        assert not atlantic_route.is_canal_route
        assert suez_route.is_canal_route

    def test_routes_start_at_alexandria(self):
        for route in ROUTES:
            assert route.waypoints[0] == (31.2001, 29.9187)

    def test_waypoint_id_format(self, atlantic_route):
        assert atlantic_route.waypoint_id(3) == "route1-waypoint-3"


class TestRouteGeometry:

    def test_legs_cover_consecutive_waypoints(self, suez_route):
        legs = suez_route.legs
        assert len(legs) == len(suez_route.waypoints) - 1
        assert legs[0].start == suez_route.waypoints[0]
        assert legs[-1].end == suez_route.waypoints[-1]
        assert sum(leg.distance_km for leg in legs) == pytest.approx(suez_route.total_distance_km)

    def test_course_at_uses_leg_leaving_waypoint(self, short_route):
        assert short_route.course_at(0) == pytest.approx(90.0)
        assert short_route.course_at(1) == pytest.approx(90.0)

    def test_course_at_last_waypoint_keeps_previous_leg(self, atlantic_route):
        last = len(atlantic_route.waypoints) - 1
        (lat1, lon1), (lat2, lon2) = atlantic_route.waypoints[-2], atlantic_route.waypoints[-1]
        assert atlantic_route.course_at(last) == pytest.approx(
            calculate_bearing(lat1, lon1, lat2, lon2)
        )

    def test_course_at_single_point_route(self, short_route):
        from dataclasses import replace

        single = replace(short_route, waypoints=((0.0, 0.0),))
        assert single.course_at(0) == 0.0


class TestPorts:

    def test_port_waypoint_index(self, atlantic_route):
        indices = {port.name: atlantic_route.port_waypoint_index(port) for port in atlantic_route.ports}
        assert indices["Alexandria"] == 0
        assert indices["Lisbon"] == 11
        assert indices["New York"] == len(atlantic_route.waypoints) - 1

    def test_major_ports_after_excludes_minor_and_passed(self, short_route):
        names = [port.name for port in short_route.major_ports_after(0)]
        assert names == ["Midway"]

    def test_major_ports_after_destination_is_empty(self, suez_route):
        assert suez_route.major_ports_after(len(suez_route.waypoints) - 1) == []

    def test_major_ports_after_origin(self, suez_route):
        names = [port.name for port in suez_route.major_ports_after(0)]
        assert names == ["Mumbai", "Singapore"]
