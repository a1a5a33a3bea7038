"""Tests for settings and logging setup."""
import logging

import pytest
from pydantic import ValidationError
from climbgen.config import Settings, get_settings
from climbgen.setup_logging import setup_logging


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.max_batch_size == 50
        assert settings.log_level == "INFO"

    def test_cors_comma_separated(self):
        settings = Settings(_env_file=None, cors_origins="http://a, http://b,")
        assert settings.get_cors_origins() == ["http://a", "http://b"]

    def test_cors_json(self):
        settings = Settings(_env_file=None, cors_origins='["http://a", "http://b"]')
        assert settings.get_cors_origins() == ["http://a", "http://b"]

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level=" debug ").log_level == "DEBUG"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_batch_size=0)

    def test_get_settings_cached(self, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        assert get_settings() is get_settings()


class TestLogging:
    """Test cases for setup_logging."""

    def test_package_level(self):
        setup_logging("DEBUG")
        assert logging.getLogger("climbgen").level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        setup_logging("INFO")
        assert logging.getLogger("climbgen").level == logging.INFO
