"""
Weather and ocean snapshots sampled at route waypoints.

Units:
    wind speed m/s, direction the wind blows FROM (meteorological)
    wave/swell height m, swell direction the swell travels TOWARD
    current speed knots, direction the current flows TOWARD
    temperatures °C, visibility km

Snapshots are built either from OpenWeatherMap-shaped payloads
(``{"wind": {"speed", "deg"}, "main": {"temp"}, ...}``) or from flat
snake_case dicts. Numeric fields tolerate string-encoded numbers;
missing or unparseable values default to 0.
"""

import math
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

Coordinate = Tuple[float, float]


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a possibly string-encoded number.

    ``"1.5"`` -> 1.5, ``"1.5m"`` -> 1.5 (leading numeric prefix, like a
    lenient float parse), ``None``/``""``/``"n/a"``/NaN -> default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    text = str(value).strip()
    try:
        result = float(text)
    except ValueError:
        # Accept a leading numeric prefix ("2.3 m")
        end = 0
        for i, ch in enumerate(text):
            if ch.isdigit() or ch in "+-.eE":
                end = i + 1
            else:
                break
        try:
            result = float(text[:end])
        except ValueError:
            return default
    return result if math.isfinite(result) else default


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _pick(value: Any, fallback: Any) -> Any:
    return value if value is not None else fallback


@dataclass(frozen=True)
class WeatherSnapshot:
    """Atmospheric conditions at a waypoint."""
    wind_speed_ms: float = 0.0
    wind_dir_deg: float = 0.0
    temperature_c: float = 20.0
    condition: str = "Clear"
    description: str = ""
    icon: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeatherSnapshot":
        """Build from an OpenWeatherMap payload or a flat dict."""
        wind = data.get("wind") if isinstance(data.get("wind"), Mapping) else {}
        main = data.get("main") if isinstance(data.get("main"), Mapping) else {}
        conditions = data.get("weather")
        first_condition = conditions[0] if isinstance(conditions, list) and conditions else {}

        return cls(
            wind_speed_ms=parse_number(_pick(_first(data, "wind_speed_ms"), wind.get("speed"))),
            wind_dir_deg=parse_number(_pick(_first(data, "wind_dir_deg"), wind.get("deg"))),
            temperature_c=parse_number(
                _pick(_first(data, "temperature_c"), main.get("temp")), default=20.0
            ),
            condition=str(_pick(_first(data, "condition"), first_condition.get("main")) or "Clear"),
            description=str(
                _pick(_first(data, "description"), first_condition.get("description")) or ""
            ),
            icon=_pick(_first(data, "icon"), first_condition.get("icon")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OceanSnapshot:
    """Sea state and current at a waypoint."""
    wave_height_m: float = 0.0
    swell_height_m: float = 0.0
    swell_dir_deg: float = 0.0
    current_speed_kts: float = 0.0
    current_dir_deg: float = 0.0
    water_temp_c: float = 20.0
    visibility_km: float = 10.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OceanSnapshot":
        """Build from camelCase (map client) or snake_case keys."""
        return cls(
            wave_height_m=parse_number(_first(data, "wave_height_m", "waveHeight")),
            swell_height_m=parse_number(_first(data, "swell_height_m", "swellHeight")),
            swell_dir_deg=parse_number(_first(data, "swell_dir_deg", "swellDirection")),
            current_speed_kts=parse_number(_first(data, "current_speed_kts", "currentSpeed")),
            current_dir_deg=parse_number(_first(data, "current_dir_deg", "currentDirection")),
            water_temp_c=parse_number(_first(data, "water_temp_c", "waterTemp"), default=20.0),
            visibility_km=parse_number(_first(data, "visibility_km", "visibility"), default=10.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WaypointWeather:
    """
    Weather sample for one waypoint.

    ``weather`` and ``ocean`` are None when no data is available; that
    absence is the only "no data" signal the speed model understands.
    ``error`` carries a message for the error-marker variant.
    """
    weather: Optional[WeatherSnapshot]
    ocean: Optional[OceanSnapshot]
    timestamp: datetime
    coordinates: Optional[Coordinate] = None
    waypoint_id: Optional[str] = None
    source: str = "live"  # 'live', 'synthetic', 'error'
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.weather is not None and self.ocean is not None

    @classmethod
    def error_marker(
        cls,
        message: str,
        coordinates: Optional[Coordinate] = None,
        waypoint_id: Optional[str] = None,
    ) -> "WaypointWeather":
        return cls(
            weather=None,
            ocean=None,
            timestamp=datetime.now(timezone.utc),
            coordinates=coordinates,
            waypoint_id=waypoint_id,
            source="error",
            error=message,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WaypointWeather":
        """Build from a dict holding ``weather``/``ocean`` sub-objects."""
        weather = data.get("weather")
        ocean = data.get("ocean")
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        coords = data.get("coordinates")
        return cls(
            weather=WeatherSnapshot.from_dict(weather) if isinstance(weather, Mapping) else None,
            ocean=OceanSnapshot.from_dict(ocean) if isinstance(ocean, Mapping) else None,
            timestamp=timestamp or datetime.now(timezone.utc),
            coordinates=tuple(coords) if coords is not None else None,
            waypoint_id=data.get("waypoint_id") or data.get("waypointId"),
            source=data.get("source", "live"),
            error=data.get("error"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weather": self.weather.to_dict() if self.weather else None,
            "ocean": self.ocean.to_dict() if self.ocean else None,
            "timestamp": self.timestamp.isoformat(),
            "coordinates": list(self.coordinates) if self.coordinates else None,
            "waypoint_id": self.waypoint_id,
            "source": self.source,
            "error": self.error,
        }


def coerce_waypoint_weather(value: Any) -> Optional[WaypointWeather]:
    """Accept a WaypointWeather, a raw mapping, or None."""
    if value is None or isinstance(value, WaypointWeather):
        return value
    if isinstance(value, Mapping):
        return WaypointWeather.from_dict(value)
    raise TypeError(f"Unsupported weather payload type: {type(value).__name__}")
