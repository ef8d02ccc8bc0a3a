"""
Tests for along-course resolution of wind, wave, swell and current.

Covers:
- Relative angles are normalized to [-180, 180) for every force
- Wind direction is turned around (FROM), the others are used as given
- Beam components are exactly zero
- Wave/swell loss is never negative
- Current is unclamped and positive means favorable
"""

import math

import pytest

from tradelane.performance.profile import ShipProfile
from tradelane.performance.resistance import (
    DirectionConvention,
    ForceKind,
    ForceState,
    calculate_current_effect,
    calculate_swell_resistance,
    calculate_wave_resistance,
    calculate_wind_resistance,
    normalize_angle,
    resolve_along_course,
)


class TestNormalizeAngle:

    @pytest.mark.parametrize("angle,expected", [
        (0, 0), (90, 90), (180, -180), (-180, -180), (270, -90), (-270, 90), (720, 0), (359, -1),
    ])
    def test_range(self, angle, expected):
        assert normalize_angle(angle) == pytest.approx(expected)


class TestResolveAlongCourse:

    def test_toward_same_direction_is_full_positive(self):
        resolved = resolve_along_course(2.0, 90.0, 90.0, DirectionConvention.TOWARD)
        assert resolved.relative_angle_deg == 0.0
        assert resolved.along_course == pytest.approx(2.0)

    def test_from_is_turned_around(self):
        toward = resolve_along_course(5.0, 270.0, 90.0, DirectionConvention.TOWARD)
        from_ = resolve_along_course(5.0, 90.0, 90.0, DirectionConvention.FROM)
        assert from_.relative_angle_deg == toward.relative_angle_deg
        assert from_.along_course == pytest.approx(toward.along_course)

    @pytest.mark.parametrize("direction", [0.0, 180.0])
    def test_beam_component_is_exactly_zero(self, direction):
        resolved = resolve_along_course(10.0, direction, 90.0, DirectionConvention.TOWARD)
        assert resolved.along_course == 0.0

    @pytest.mark.parametrize("convention", list(DirectionConvention))
    def test_relative_angle_always_normalized(self, convention):
        for direction in range(0, 360, 15):
            for course in range(0, 360, 45):
                resolved = resolve_along_course(1.0, direction, course, convention)
                assert -180.0 <= resolved.relative_angle_deg < 180.0


class TestWindResistance:

    def test_force_from_drag_equation(self):
        """0.5 * 1.225 * 0.8 * (60 * 45) * 10² = 132300 N."""
        result = calculate_wind_resistance(10.0, 180.0, 90.0)
        assert result.force_n == pytest.approx(132300.0)

    def test_calm_wind(self):
        result = calculate_wind_resistance(0.0, 0.0, 0.0)
        assert result.force_n == 0.0
        assert result.speed_impact_kts == 0.0
        assert result.state is ForceState.NEUTRAL
        assert result.flags == {"is_headwind": False, "is_tailwind": False}

    def test_beam_wind_has_no_impact(self):
        result = calculate_wind_resistance(10.0, 180.0, 90.0)
        assert result.along_course == 0.0
        assert result.speed_impact_kts == 0.0
        assert result.sog_contribution_kts == 0.0

    def test_positive_component_is_headwind(self):
        # Wind from 180 is turned toward 0, along a course of 0
        result = calculate_wind_resistance(10.0, 180.0, 0.0)
        assert result.along_course == pytest.approx(10.0)
        assert result.speed_impact_kts == pytest.approx(0.25)
        assert result.sog_contribution_kts == pytest.approx(-0.25)
        assert result.flags == {"is_headwind": True, "is_tailwind": False}

    def test_negative_component_is_tailwind(self):
        result = calculate_wind_resistance(10.0, 0.0, 0.0)
        assert result.along_course == pytest.approx(-10.0)
        assert result.is_assisting
        assert result.flags["is_tailwind"]

    def test_custom_ship_profile(self):
        ship = ShipProfile(beam_m=30.0, height_m=20.0, wind_resistance_coefficient=0.05)
        result = calculate_wind_resistance(10.0, 180.0, 0.0, ship=ship)
        assert result.force_n == pytest.approx(0.5 * 1.225 * 0.8 * 600 * 100)
        assert result.speed_impact_kts == pytest.approx(0.5)

    def test_ship_speed_carried_through(self):
        assert calculate_wind_resistance(5.0, 0.0, 0.0, ship_speed_kts=18.0).ship_speed_kts == 18.0


class TestSeaStateResistance:

    def test_head_sea_loss(self):
        result = calculate_wave_resistance(2.0, 45.0, 45.0)
        assert result.kind is ForceKind.WAVES
        assert result.speed_impact_kts == pytest.approx(0.6)
        assert result.flags == {"is_head_sea": True, "is_following_sea": False}

    def test_following_sea_gives_no_bonus(self):
        result = calculate_wave_resistance(2.0, 225.0, 45.0)
        assert result.along_course == pytest.approx(-2.0)
        assert result.speed_impact_kts == 0.0
        assert result.flags["is_following_sea"]

    def test_swell_coefficient(self):
        result = calculate_swell_resistance(3.0, 0.0, 0.0)
        assert result.kind is ForceKind.SWELL
        assert result.speed_impact_kts == pytest.approx(0.6)
        assert result.flags["is_head_swell"]

    def test_loss_is_never_negative(self):
        for direction in range(0, 360, 10):
            assert calculate_wave_resistance(3.0, direction, 0.0).speed_impact_kts >= 0.0
            assert calculate_swell_resistance(3.0, direction, 0.0).speed_impact_kts >= 0.0

    def test_oblique_swell(self):
        result = calculate_swell_resistance(2.0, 60.0, 0.0)
        assert result.speed_impact_kts == pytest.approx(2.0 * math.cos(math.radians(60)) * 0.2)


class TestCurrentEffect:

    def test_favorable_current(self):
        result = calculate_current_effect(2.0, 90.0, 90.0)
        assert result.speed_impact_kts == pytest.approx(2.0)
        assert result.sog_contribution_kts == pytest.approx(2.0)
        assert result.flags == {"is_adverse": False, "is_favorable": True}

    def test_adverse_current_is_unclamped(self):
        result = calculate_current_effect(1.5, 270.0, 90.0)
        assert result.speed_impact_kts == pytest.approx(-1.5)
        assert result.state is ForceState.OPPOSING
        assert result.flags["is_adverse"]

    def test_to_dict_nests_flags(self):
        data = calculate_current_effect(1.0, 0.0, 0.0).to_dict()
        assert data["kind"] == "current"
        assert data["state"] == "assisting"
        assert data["flags"] == {"is_adverse": False, "is_favorable": True}
