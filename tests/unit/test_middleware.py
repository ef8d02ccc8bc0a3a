"""Tests for middleware helpers."""

import json
import logging

import pytest

from api.middleware import StructuredLogger, request_id_ctx, route_id_from_path


@pytest.mark.parametrize("path,route_id", [
    ("/api/routes/route1", "route1"),
    ("/api/routes/route2/metrics", "route2"),
    ("/api/weather/route/route1", "route1"),
    ("/api/simulation/route2/run", "route2"),
    ("/api/routes/distance", None),
    ("/api/routes", None),
    ("/api/voyage/speed", None),
])
def test_route_id_from_path(path, route_id):
    assert route_id_from_path(path) == route_id


class TestStructuredLogger:

    def test_json_entry_with_request_id(self, caplog):
        logger = StructuredLogger("tradelane.test", service="unit")
        token = request_id_ctx.set("req-1")
        try:
            with caplog.at_level(logging.INFO, logger="tradelane.test"):
                logger.info("Simulated", route_id="route1", steps=28, skipped=None)
        finally:
            request_id_ctx.reset(token)

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["message"] == "Simulated"
        assert entry["service"] == "unit"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "req-1"
        assert entry["steps"] == 28
        assert "skipped" not in entry

    def test_disabled_level_is_skipped(self, caplog):
        logger = StructuredLogger("tradelane.quiet")
        with caplog.at_level(logging.WARNING, logger="tradelane.quiet"):
            logger.debug("hidden")
        assert not caplog.records
