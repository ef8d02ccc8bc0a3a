"""
Along-course resolution of wind, wave, swell and current.

All four forces share one shape: resolve the environmental vector
against the ship's course, project it with a cosine, then scale it.
``resolve_along_course`` implements that once; the direction
convention is an explicit argument so the FROM/TOWARD asymmetry is
stated at each call site:

- wind direction is meteorological (blowing FROM) and is turned
  around by 180° before projection
- wave, swell and current directions are used as given (TOWARD)

Sign convention of the projected component (as in the demo model):

- wind/wave/swell: positive along-course component opposes the ship
  (headwind, head sea, head swell)
- current: positive along-course component is favorable

Relative angles are normalized to [-180, 180) for every force.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from tradelane.performance.profile import ShipProfile

# Projections smaller than this are beam components (cos(±90°) residue)
ALONG_COURSE_EPSILON = 1e-9

DEFAULT_SHIP = ShipProfile()


class DirectionConvention(str, Enum):
    """Meaning of a direction in degrees."""
    FROM = "from"  # Vector arrives from this bearing (wind)
    TOWARD = "toward"  # Vector travels toward this bearing (swell, current)


class ForceKind(str, Enum):
    WIND = "wind"
    WAVES = "waves"
    SWELL = "swell"
    CURRENT = "current"


class ForceState(str, Enum):
    """Effect of a force on progress along the course."""
    OPPOSING = "opposing"
    ASSISTING = "assisting"
    NEUTRAL = "neutral"


_FLAG_NAMES = {
    ForceKind.WIND: ("is_headwind", "is_tailwind"),
    ForceKind.WAVES: ("is_head_sea", "is_following_sea"),
    ForceKind.SWELL: ("is_head_swell", "is_following_swell"),
    ForceKind.CURRENT: ("is_adverse", "is_favorable"),
}


def normalize_angle(angle_deg: float) -> float:
    """Wrap an angle into [-180, 180)."""
    return ((angle_deg + 180.0) % 360.0) - 180.0


@dataclass(frozen=True)
class AlongCourse:
    """A vector resolved against the ship's course."""
    relative_angle_deg: float
    along_course: float


def resolve_along_course(
    magnitude: float,
    direction_deg: float,
    course_deg: float,
    convention: DirectionConvention,
) -> AlongCourse:
    """
    Project a magnitude/direction pair onto the ship's course.

    Args:
        magnitude: Vector magnitude (any unit, >= 0)
        direction_deg: Vector direction in degrees
        course_deg: Ship's course in degrees
        convention: Whether direction_deg is a FROM or TOWARD bearing

    Returns:
        AlongCourse with the normalized relative angle and the signed
        along-course component (same unit as magnitude)
    """
    if convention is DirectionConvention.FROM:
        direction_deg = (direction_deg + 180.0) % 360.0
    relative_angle = normalize_angle(direction_deg - course_deg)
    along = magnitude * math.cos(math.radians(relative_angle))
    if abs(along) < ALONG_COURSE_EPSILON:
        along = 0.0
    return AlongCourse(relative_angle_deg=relative_angle, along_course=along)


@dataclass(frozen=True)
class ResistanceResult:
    """
    Effect of one environmental force on the ship.

    ``speed_impact_kts`` keeps the per-force meaning of the model:
    wind impact (signed, positive slows the ship), wave/swell loss
    (never negative) and current along-course speed (positive helps).
    ``sog_contribution_kts`` is the signed term added to the base speed.
    """
    kind: ForceKind
    relative_angle_deg: float
    along_course: float
    speed_impact_kts: float
    state: ForceState
    force_n: float = 0.0
    ship_speed_kts: Optional[float] = None

    @property
    def sog_contribution_kts(self) -> float:
        if self.kind is ForceKind.CURRENT:
            return self.speed_impact_kts
        return -self.speed_impact_kts

    @property
    def is_opposing(self) -> bool:
        return self.state is ForceState.OPPOSING

    @property
    def is_assisting(self) -> bool:
        return self.state is ForceState.ASSISTING

    @property
    def flags(self) -> Dict[str, bool]:
        """Named classification flags for this kind of force."""
        opposing_name, assisting_name = _FLAG_NAMES[self.kind]
        return {opposing_name: self.is_opposing, assisting_name: self.is_assisting}

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "relative_angle_deg": self.relative_angle_deg,
            "along_course": self.along_course,
            "speed_impact_kts": self.speed_impact_kts,
            "state": self.state.value,
            "force_n": self.force_n,
            "flags": self.flags,
        }


def _classify(along_course: float, positive: ForceState) -> ForceState:
    if along_course > 0:
        return positive
    if along_course < 0:
        return ForceState.ASSISTING if positive is ForceState.OPPOSING else ForceState.OPPOSING
    return ForceState.NEUTRAL


def calculate_wind_resistance(
    wind_speed_ms: float,
    wind_dir_deg: float,
    ship_course_deg: float,
    ship_speed_kts: Optional[float] = None,
    ship: ShipProfile = DEFAULT_SHIP,
) -> ResistanceResult:
    """
    Wind force and speed impact.

    Force: Fw = ½ · ρa · Cd · A · V² with A = beam × height.

    Args:
        wind_speed_ms: True wind speed (m/s)
        wind_dir_deg: Direction the wind blows FROM (degrees)
        ship_course_deg: Ship's course (degrees)
        ship_speed_kts: Carried into the result only
        ship: Ship particulars and coefficients

    Returns:
        ResistanceResult; calm wind gives zero force and a NEUTRAL state
    """
    resolved = resolve_along_course(
        wind_speed_ms, wind_dir_deg, ship_course_deg, DirectionConvention.FROM,
    )
    force = (
        0.5
        * ship.air_density
        * ship.drag_coefficient
        * ship.transverse_area_m2
        * wind_speed_ms ** 2
    )
    return ResistanceResult(
        kind=ForceKind.WIND,
        relative_angle_deg=resolved.relative_angle_deg,
        along_course=resolved.along_course,
        speed_impact_kts=resolved.along_course * ship.wind_resistance_coefficient,
        state=_classify(resolved.along_course, ForceState.OPPOSING),
        force_n=force,
        ship_speed_kts=ship_speed_kts,
    )


def _sea_state_resistance(
    kind: ForceKind,
    height_m: float,
    direction_deg: float,
    ship_course_deg: float,
    coefficient: float,
) -> ResistanceResult:
    resolved = resolve_along_course(
        height_m, direction_deg, ship_course_deg, DirectionConvention.TOWARD,
    )
    # Only a head component costs speed; following seas give no bonus
    speed_loss = max(0.0, resolved.along_course) * coefficient
    return ResistanceResult(
        kind=kind,
        relative_angle_deg=resolved.relative_angle_deg,
        along_course=resolved.along_course,
        speed_impact_kts=speed_loss,
        state=_classify(resolved.along_course, ForceState.OPPOSING),
    )


def calculate_wave_resistance(
    wave_height_m: float,
    wave_dir_deg: float,
    ship_course_deg: float,
    ship: ShipProfile = DEFAULT_SHIP,
) -> ResistanceResult:
    """Speed loss from wind waves (kn), 0 for following seas."""
    return _sea_state_resistance(
        ForceKind.WAVES, wave_height_m, wave_dir_deg, ship_course_deg,
        ship.wave_resistance_coefficient,
    )


def calculate_swell_resistance(
    swell_height_m: float,
    swell_dir_deg: float,
    ship_course_deg: float,
    ship: ShipProfile = DEFAULT_SHIP,
) -> ResistanceResult:
    """Speed loss from swell (kn), 0 for following swell."""
    return _sea_state_resistance(
        ForceKind.SWELL, swell_height_m, swell_dir_deg, ship_course_deg,
        ship.swell_resistance_coefficient,
    )


def calculate_current_effect(
    current_speed_kts: float,
    current_dir_deg: float,
    ship_course_deg: float,
) -> ResistanceResult:
    """Along-course current (kn), unclamped: positive helps, negative hinders."""
    resolved = resolve_along_course(
        current_speed_kts, current_dir_deg, ship_course_deg, DirectionConvention.TOWARD,
    )
    return ResistanceResult(
        kind=ForceKind.CURRENT,
        relative_angle_deg=resolved.relative_angle_deg,
        along_course=resolved.along_course,
        speed_impact_kts=resolved.along_course,
        state=_classify(resolved.along_course, ForceState.ASSISTING),
    )
