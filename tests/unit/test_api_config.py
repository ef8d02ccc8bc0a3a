"""Tests for HTTP-layer settings."""

import pytest
from pydantic import ValidationError

from api.config import Settings


def test_csv_lists_are_split():
    settings = Settings(cors_origins="https://a.example, https://b.example,", cors_headers="*")
    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
    assert settings.cors_headers_list == ["*"]
    assert "PUT" in settings.cors_methods_list


def test_environment_normalized():
    settings = Settings(environment=" Development ", log_level="DEBUG")
    assert settings.is_development
    assert settings.log_level == "debug"


def test_production_rejects_localhost_origins():
    with pytest.raises(ValidationError):
        Settings(environment="production", cors_origins="http://localhost:3000")
    assert Settings(environment="production", cors_origins="https://app.example").is_production
