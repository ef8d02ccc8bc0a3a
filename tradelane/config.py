"""
Estimator and weather-provider settings.

Values come from environment variables, optionally seeded from a
``.env`` file at the project root. Unparseable numbers fall back to
their defaults; out-of-range values are replaced with a warning.

Usage:
    from tradelane.config import settings

    if settings.has_weather_credentials:
        ...
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE)

logger = logging.getLogger(__name__)

PORT_FEE_POLICIES = ("heuristic", "exact")
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_int(key: str) -> Optional[int]:
    """Integer variable, or None when it is unset, empty or not a number."""
    raw = os.getenv(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _env(key: str, default=None):
    return field(default_factory=lambda: os.getenv(key, default))


@dataclass
class Settings:
    """Settings shared by the estimator library, the API and the CLI."""

    # OpenWeatherMap current-weather endpoint
    openweather_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("OPENWEATHER_API_KEY") or None
    )
    openweather_base_url: str = _env("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
    weather_timeout_s: float = field(default_factory=lambda: get_float("WEATHER_TIMEOUT_S", 10.0))
    weather_max_retries: int = field(default_factory=lambda: get_int("WEATHER_MAX_RETRIES", 3))
    # Unset leaves the synthetic generator unseeded
    weather_fallback_seed: Optional[int] = field(
        default_factory=lambda: get_optional_int("WEATHER_FALLBACK_SEED")
    )

    sim_base_speed_kts: float = field(default_factory=lambda: get_float("SIM_BASE_SPEED_KTS", 20.0))
    sim_step_interval_s: float = field(default_factory=lambda: get_float("SIM_STEP_INTERVAL_S", 2.0))
    sim_port_fee_policy: str = _env("SIM_PORT_FEE_POLICY", "heuristic")

    log_level: str = _env("LOG_LEVEL", "INFO")
    log_format: str = _env("LOG_FORMAT", DEFAULT_LOG_FORMAT)

    def __post_init__(self):
        self.sim_port_fee_policy = self.sim_port_fee_policy.strip().lower()

        if self.sim_base_speed_kts <= 0:
            logger.warning("SIM_BASE_SPEED_KTS=%s is not positive, using 20.0", self.sim_base_speed_kts)
            self.sim_base_speed_kts = 20.0
        if self.sim_step_interval_s < 0:
            logger.warning("SIM_STEP_INTERVAL_S=%s is negative, using 2.0", self.sim_step_interval_s)
            self.sim_step_interval_s = 2.0
        if self.sim_port_fee_policy not in PORT_FEE_POLICIES:
            logger.warning(
                "SIM_PORT_FEE_POLICY=%r is not one of %s, using 'heuristic'",
                self.sim_port_fee_policy, ", ".join(PORT_FEE_POLICIES),
            )
            self.sim_port_fee_policy = "heuristic"
        self.weather_max_retries = max(1, self.weather_max_retries)

    @property
    def has_weather_credentials(self) -> bool:
        return bool(self.openweather_api_key)

    def configure_logging(self):
        """Root logging setup for the CLI."""
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        logging.basicConfig(level=level, format=self.log_format)


settings = Settings()


def get_settings() -> Settings:
    return settings
