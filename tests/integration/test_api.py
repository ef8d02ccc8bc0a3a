"""
Integration tests for the TRADELANE API.

Fixtures (client, app_state) provided by tests/conftest.py; weather is
served by a seeded synthetic generator.
"""

import pytest

BEAM_PAYLOAD = {
    "weather": {"wind": {"speed": 10, "deg": 180}},
    "ocean": {
        "waveHeight": "1.5",
        "swellHeight": "1.0",
        "swellDirection": 180,
        "currentSpeed": "2.0",
        "currentDirection": 90,
    },
}

STORM_PAYLOAD = {
    "weather": {"wind_speed_ms": 20, "wind_dir_deg": 0},
    "ocean": {"wave_height_m": 4.0, "swell_height_m": 3.0},
}


# ============================================================================
# System Endpoint Tests
# ============================================================================

def test_root_endpoint(client):
    """Test API root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "TRADELANE API"
    assert data["version"] == "1.0.0"
    assert data["status"] == "operational"
    assert data["routes"] == ["route1", "route2"]


def test_health_check(client):
    """Synthetic weather is healthy; no provider circuit is involved."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["weather_service"] == "synthetic"
    assert data["components"]["performance"] == "healthy"
    assert "timestamp" in data
    assert data["request_id"]


def test_request_id_and_security_headers(client):
    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.json()["request_id"] == "abc-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert float(response.headers["X-Response-Time-Ms"]) >= 0


# ============================================================================
# Route Endpoint Tests
# ============================================================================

class TestRoutesApi:

    def test_list_routes(self, client):
        response = client.get("/api/routes")
        assert response.status_code == 200
        routes = response.json()
        assert [route["id"] for route in routes] == ["route1", "route2"]
        assert routes[1]["is_canal_route"] is True
        assert routes[0]["waypoint_count"] == 28

    def test_route_detail(self, client):
        data = client.get("/api/routes/route2").json()
        assert data["style"] == "dashed"
        assert len(data["waypoints"]) == 31
        assert len(data["legs"]) == 30
        ports = {port["name"]: port for port in data["ports"]}
        assert ports["Singapore"]["waypoint_index"] == 30
        assert ports["Suez"]["port_type"] == "minor"

    def test_unknown_route(self, client):
        response = client.get("/api/routes/atlantis")
        assert response.status_code == 404
        assert "atlantis" in response.json()["detail"]

    def test_distance(self, client):
        response = client.post(
            "/api/routes/distance",
            json={"points": [{"lat": 0, "lon": 0}, {"lat": 0, "lon": 1}, {"lat": 0, "lon": 2}]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["leg_count"] == 2
        assert data["distance_km"] == pytest.approx(222.39, abs=0.01)
        assert data["distance_nm"] == pytest.approx(data["distance_km"] / 1.852)

    def test_distance_empty(self, client):
        data = client.post("/api/routes/distance", json={"points": []}).json()
        assert data["distance_km"] == 0.0
        assert data["leg_count"] == 0

    def test_distance_rejects_bad_latitude(self, client):
        response = client.post("/api/routes/distance", json={"points": [{"lat": 91, "lon": 0}]})
        assert response.status_code == 422

    def test_metrics_without_weather(self, client):
        response = client.get("/api/routes/route1/metrics", params={"use_weather": False})
        assert response.status_code == 200
        data = response.json()
        assert data["waypoints_with_data"] == 0
        assert data["avg_wind_speed_ms"] == 10.0
        assert data["adjusted_speed_kts"] == 20.0

    def test_metrics_with_weather(self, client):
        data = client.get("/api/routes/route2/metrics", params={"base_speed_kts": 18}).json()
        assert data["waypoints_with_data"] == 31
        assert data["base_speed_kts"] == 18.0
        assert data["travel_time_hours"] > 0

    def test_metrics_speed_bounds(self, client):
        assert client.get("/api/routes/route1/metrics", params={"base_speed_kts": 0}).status_code == 422
        assert client.get("/api/routes/route1/metrics", params={"base_speed_kts": 50}).status_code == 422


# ============================================================================
# Weather Endpoint Tests
# ============================================================================

class TestWeatherApi:

    def test_waypoint_weather(self, client):
        response = client.get("/api/weather/waypoint", params={"lat": 36.14, "lon": -5.35})
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "synthetic"
        assert data["coordinates"] == [36.14, -5.35]
        assert 5.0 <= data["weather"]["wind_speed_ms"] < 15.0
        assert data["ocean"]["wave_height_m"] >= 0.3
        assert data["wind_direction_name"]
        assert data["wind_arrow"]
        assert data["icon"] == "🌤️"

    def test_waypoint_weather_rejects_bad_coordinates(self, client):
        response = client.get("/api/weather/waypoint", params={"lat": 100, "lon": 0})
        assert response.status_code == 422

    def test_route_weather(self, client):
        response = client.get("/api/weather/route/route1")
        assert response.status_code == 200
        data = response.json()
        assert data["waypoint_count"] == 28
        assert "route1-waypoint-0" in data["waypoints"]
        assert data["waypoints"]["route1-waypoint-27"]["waypoint_id"] == "route1-waypoint-27"

    def test_route_weather_unknown_route(self, client):
        assert client.get("/api/weather/route/nowhere").status_code == 404


# ============================================================================
# Voyage Estimation Tests
# ============================================================================

class TestSpeedApi:

    def test_regression_baseline(self, client):
        response = client.post(
            "/api/voyage/speed",
            json={"base_speed_kts": 20, "course_deg": 90, "weather": BEAM_PAYLOAD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["sog_kts"] == pytest.approx(22.0)
        assert data["stw_kts"] == pytest.approx(18.0)
        assert data["total_resistance"] == pytest.approx(132300.0)
        assert data["factors"]["current"]["flags"]["is_favorable"] is True

    def test_no_weather_returns_base_speed(self, client):
        data = client.post("/api/voyage/speed", json={"course_deg": 45}).json()
        assert data["sog_kts"] == 20.0
        assert data["stw_kts"] == 20.0
        assert data["factors"] == {}

    def test_ocean_missing_counts_as_no_data(self, client):
        payload = {"course_deg": 0, "weather": {"weather": {"wind_speed_ms": 25}}}
        data = client.post("/api/voyage/speed", json=payload).json()
        assert data["sog_kts"] == 20.0

    def test_zero_base_speed_is_domain_error(self, client):
        response = client.post("/api/voyage/speed", json={"base_speed_kts": 0, "course_deg": 0})
        assert response.status_code == 422
        data = response.json()
        assert data["field"] == "base_speed_kts"
        assert "greater than 0" in data["detail"]

    def test_missing_course(self, client):
        assert client.post("/api/voyage/speed", json={}).status_code == 422


class TestFuelApi:

    def test_calm_fuel(self, client):
        response = client.post(
            "/api/voyage/fuel",
            json={"speed_kts": 20, "waypoint_index": 0, "total_waypoints": 10},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["current_kgh"] == pytest.approx(1260.0)
        assert data["remaining_kg"] == pytest.approx(25200.0)

    def test_storm_fuel(self, client):
        data = client.post(
            "/api/voyage/fuel",
            json={"speed_kts": 20, "waypoint_index": 0, "total_waypoints": 1, "weather": STORM_PAYLOAD},
        ).json()
        assert data["weather_multiplier"] == pytest.approx(1.5)

    def test_index_beyond_route(self, client):
        response = client.post(
            "/api/voyage/fuel",
            json={"speed_kts": 20, "waypoint_index": 5, "total_waypoints": 5},
        )
        assert response.status_code == 422
        assert response.json()["field"] == "waypoint_index"

    def test_negative_speed_rejected(self, client):
        response = client.post(
            "/api/voyage/fuel",
            json={"speed_kts": -1, "waypoint_index": 0, "total_waypoints": 5},
        )
        assert response.status_code == 422


class TestCostApi:

    def test_atlantic_cost(self, client):
        response = client.post(
            "/api/voyage/cost", json={"route_id": "route1", "waypoint_index": 0, "fuel_kg": 10000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == pytest.approx(318000.0)
        assert data["breakdown"]["ports"] == pytest.approx(30000.0)

    def test_exact_port_policy(self, client):
        data = client.post(
            "/api/voyage/cost",
            json={"route_id": "route2", "waypoint_index": 0, "fuel_kg": 0, "port_fee_policy": "exact"},
        ).json()
        assert data["port_calls"] == 2
        assert data["canal_fees"] == pytest.approx(500000.0)

    def test_severe_weather(self, client):
        data = client.post(
            "/api/voyage/cost",
            json={"route_id": "route1", "waypoint_index": 0, "fuel_kg": 10000, "weather": STORM_PAYLOAD},
        ).json()
        assert data["weather_multiplier"] == pytest.approx(1.1)
        assert data["total"] >= data["base_cost"]

    def test_unknown_policy(self, client):
        response = client.post(
            "/api/voyage/cost",
            json={"route_id": "route1", "waypoint_index": 0, "fuel_kg": 0, "port_fee_policy": "guess"},
        )
        assert response.status_code == 422

    def test_unknown_route(self, client):
        response = client.post(
            "/api/voyage/cost", json={"route_id": "x", "waypoint_index": 0, "fuel_kg": 0},
        )
        assert response.status_code == 404


class TestTravelTimeApi:

    def test_one_degree_at_twenty_knots(self, client):
        response = client.post(
            "/api/voyage/travel-time",
            json={"start": {"lat": 0, "lon": 0}, "end": {"lat": 1, "lon": 0}, "speed_kts": 20},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["speed_kmh"] == pytest.approx(37.04)
        assert data["time_hours"] == pytest.approx(111.195 / 37.04, rel=1e-4)
        assert data["formatted"] == "3h 0m"

    def test_zero_speed(self, client):
        response = client.post(
            "/api/voyage/travel-time",
            json={"start": {"lat": 0, "lon": 0}, "end": {"lat": 1, "lon": 0}, "speed_kts": 0},
        )
        assert response.status_code == 422
        assert response.json()["field"] == "speed_kts"


class TestEstimateApi:

    def test_with_supplied_weather(self, client):
        response = client.post(
            "/api/voyage/estimate",
            json={"route_id": "route1", "waypoint_index": 3, "weather": BEAM_PAYLOAD},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["waypoint_id"] == "route1-waypoint-3"
        assert data["weather_source"] == "client"
        assert 0 <= data["course_deg"] < 360
        assert data["fuel"] is not None
        assert data["cost"]["port_calls"] == 2

    def test_fetches_weather_when_missing(self, client):
        data = client.post("/api/voyage/estimate", json={"route_id": "route2", "waypoint_index": 0}).json()
        assert data["weather_source"] == "synthetic"
        assert data["cost"]["canal_fees"] == pytest.approx(500000.0)

    def test_supplied_empty_weather_means_no_data(self, client):
        data = client.post(
            "/api/voyage/estimate", json={"route_id": "route1", "waypoint_index": 0, "weather": {}},
        ).json()
        assert data["speed"]["sog_kts"] == 20.0
        assert data["fuel"] is None
        assert data["cost"] is None

    def test_index_out_of_range(self, client):
        response = client.post("/api/voyage/estimate", json={"route_id": "route1", "waypoint_index": 28})
        assert response.status_code == 422

    def test_unknown_route(self, client):
        response = client.post("/api/voyage/estimate", json={"route_id": "none", "waypoint_index": 0})
        assert response.status_code == 404


class TestProfileApi:

    def test_get_profile(self, client):
        data = client.get("/api/voyage/profile").json()
        assert data["ship"]["beam_m"] == 60.0
        assert data["fuel"]["base_fuel_kgh"] == 1260.0
        assert data["cost"]["port_fee_policy"] == "heuristic"

    def test_update_changes_estimates(self, client):
        response = client.put(
            "/api/voyage/profile",
            json={"cost": {"port_fee_policy": "exact", "port_fee_per_call": 20000}},
        )
        assert response.status_code == 200
        assert response.json()["cost"]["port_fee_policy"] == "exact"

        data = client.post(
            "/api/voyage/cost", json={"route_id": "route2", "waypoint_index": 0, "fuel_kg": 0},
        ).json()
        assert data["port_fees"] == pytest.approx(40000.0)

    def test_update_ship(self, client):
        client.put("/api/voyage/profile", json={"ship": {"wind_resistance_coefficient": 0.1}})
        data = client.post(
            "/api/voyage/speed",
            json={"course_deg": 0, "weather": {"weather": {"wind_speed_ms": 10, "wind_dir_deg": 180},
                                              "ocean": {}}},
        ).json()
        assert data["sog_kts"] == pytest.approx(19.0)

    def test_fuel_base_speed_from_profile(self, client):
        response = client.put("/api/voyage/profile", json={"fuel": {"base_speed_kts": 10}})
        assert response.json()["fuel"]["base_speed_kts"] == 10.0

        payload = {"speed_kts": 10, "waypoint_index": 0, "total_waypoints": 5}
        data = client.post("/api/voyage/fuel", json=payload).json()
        assert data["speed_factor"] == pytest.approx(1.0)
        assert data["resistance_factor"] == pytest.approx(1.0)

        explicit = client.post("/api/voyage/fuel", json={**payload, "base_speed_kts": 20}).json()
        assert explicit["speed_factor"] == pytest.approx(0.5)

    def test_profile_base_speed_drives_speed_and_simulation(self, client):
        client.put("/api/voyage/profile", json={"fuel": {"base_speed_kts": 12}})

        assert client.post("/api/voyage/speed", json={"course_deg": 0}).json()["sog_kts"] == 12.0

        estimate = client.post(
            "/api/voyage/estimate",
            json={"route_id": "route1", "waypoint_index": 0,
                  "weather": {"weather": {"wind_speed_ms": 0}, "ocean": {}}},
        ).json()
        assert estimate["speed"]["sog_kts"] == pytest.approx(12.0)
        assert estimate["fuel"]["speed_factor"] == pytest.approx(1.0)

        weather = {
            f"route1-waypoint-{i}": {"weather": {"wind_speed_ms": 0}, "ocean": {}}
            for i in range(28)
        }
        data = client.post("/api/simulation/route1/run", json={"weather": weather}).json()
        assert all(step["sog_kts"] == 12.0 for step in data["steps"])

    def test_invalid_update(self, client):
        response = client.put("/api/voyage/profile", json={"ship": {"base_power_kw": -5}})
        assert response.status_code == 422


# ============================================================================
# Simulation Tests
# ============================================================================

class TestSimulationApi:

    def test_run_with_fetched_weather(self, client):
        response = client.post("/api/simulation/route1/run")
        assert response.status_code == 200
        data = response.json()
        assert data["completed"] is True
        assert len(data["steps"]) == 28
        assert data["steps"][0]["progress_pct"] == 0.0
        assert data["steps"][-1]["progress_pct"] == 100.0
        assert data["steps"][-1]["segment_hours"] is None
        assert data["total_time_hours"] == pytest.approx(data["steps"][-1]["elapsed_hours"])
        assert data["total_time_formatted"].endswith("m")

    def test_calm_supplied_weather(self, client):
        weather = {
            f"route2-waypoint-{i}": {"weather": {"wind_speed_ms": 0}, "ocean": {}}
            for i in range(31)
        }
        data = client.post(
            "/api/simulation/route2/run", json={"base_speed_kts": 15, "weather": weather},
        ).json()
        assert all(step["sog_kts"] == 15.0 for step in data["steps"])
        assert all(step["has_weather"] for step in data["steps"])

    def test_partial_weather(self, client):
        weather = {"route1-waypoint-0": {"weather": {"wind_speed_ms": 5}, "ocean": {}}}
        data = client.post("/api/simulation/route1/run", json={"weather": weather}).json()
        steps = data["steps"]
        assert steps[0]["has_weather"] is True
        assert steps[1]["has_weather"] is False
        assert steps[1]["fuel"] is None
        assert steps[1]["sog_kts"] == 20.0
        assert data["completed"] is True

    def test_port_policy_override(self, client):
        data = client.post("/api/simulation/route2/run", json={"port_fee_policy": "exact"}).json()
        assert data["steps"][0]["cost"]["port_calls"] == 2

    def test_invalid_speed(self, client):
        response = client.post("/api/simulation/route1/run", json={"base_speed_kts": -3})
        assert response.status_code == 422

    def test_unknown_route(self, client):
        assert client.post("/api/simulation/nowhere/run").status_code == 404
