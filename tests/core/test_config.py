"""Tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from core.config import Settings, load_settings
from core.types import Environment


def test_environment_values() -> None:
    """Test environment enum values."""
    assert Environment.DEVELOPMENT == "development"
    assert Environment.PRODUCTION == "production"
    assert Environment.TESTING == "testing"


def test_default_settings() -> None:
    """Test default settings values."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.api_title == "Mocklite API"
        assert settings.api_version == "1.0.0"
        assert settings.cors_allow_origins == ["*"]
        assert settings.log_level == "INFO"
        assert settings.port == 3000
        assert settings.config_path == Path("mocklite.config.json")
        assert settings.admin_enabled is True
        assert settings.random_seed is None


def test_development_mode_properties() -> None:
    """Test development mode properties."""
    with patch.dict(os.environ, {"MOCKLITE_ENV": "development"}, clear=True):
        settings = load_settings()

        assert settings.is_development is True
        assert settings.is_production is False
        assert settings.is_testing is False
        assert settings.admin_enabled is True


def test_production_mode_properties() -> None:
    """Test production mode never enables the admin routes."""
    with patch.dict(
        os.environ,
        {"MOCKLITE_ENV": "production", "MOCKLITE_ADMIN_ENABLED": "true"},
        clear=True,
    ):
        settings = load_settings()

        assert settings.is_production is True
        assert settings.admin_enabled is False


def test_testing_mode_properties() -> None:
    """Test testing mode properties."""
    with patch.dict(os.environ, {"MOCKLITE_ENV": "testing"}, clear=True):
        settings = load_settings()

        assert settings.is_testing is True
        assert settings.is_development is False


def test_load_settings_from_environment() -> None:
    """Test every supported variable is read."""
    environ = {
        "MOCKLITE_CORS_ORIGINS": "http://a.test, http://b.test",
        "MOCKLITE_LOG_LEVEL": "debug",
        "MOCKLITE_PORT": "4000",
        "MOCKLITE_CONFIG": "conf/api.json",
        "MOCKLITE_DELAY_MS": "150",
        "MOCKLITE_ERROR_RATE": "0.25",
        "MOCKLITE_RANDOM_SEED": "7",
        "MOCKLITE_ADMIN_ENABLED": "no",
    }
    with patch.dict(os.environ, environ, clear=True):
        settings = load_settings()

    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"
    assert settings.port == 4000
    assert settings.config_path == Path("conf/api.json")
    assert settings.delay_ms == 150
    assert settings.error_rate == 0.25
    assert settings.random_seed == 7
    assert settings.admin_enabled is False


@pytest.mark.parametrize("field, value", [("error_rate", 1.5), ("delay_ms", -1)])
def test_settings_validation(field: str, value: float) -> None:
    """Test out-of-range simulation settings are rejected."""
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_settings_loaded_on_demand() -> None:
    """Test importing core reads no environment; callers load settings."""
    import core
    import core.config

    assert not hasattr(core.config, "settings")
    assert "settings" not in core.__all__
    assert core.load_settings is load_settings
