"""
HTTP-layer settings for the TRADELANE API.

Read from environment variables (or ``.env``) with pydantic-settings.
Estimator and weather-provider settings live in ``tradelane.config``.
"""
from functools import lru_cache
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "testing", "staging", "production")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Server, CORS and runtime-mode settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS, comma-separated lists
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    cors_credentials: bool = True
    cors_methods: str = "GET,POST,PUT,OPTIONS"
    cors_headers: str = "*"

    # Runtime
    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    @field_validator("environment", "log_level")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _no_localhost_in_production(self) -> "Settings":
        if self.is_production and any("localhost" in o.lower() for o in self.cors_origins_list):
            raise ValueError("CORS_ORIGINS must not include localhost in production")
        return self

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    @property
    def cors_methods_list(self) -> List[str]:
        return _split_csv(self.cors_methods)

    @property
    def cors_headers_list(self) -> List[str]:
        return _split_csv(self.cors_headers)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
