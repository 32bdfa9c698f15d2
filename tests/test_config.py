"""
Tests for settings and logging configuration
"""

import pytest
import structlog
from pydantic import ValidationError

from tms.config import Settings, get_settings, settings
from tms.core.logging_config import configure_logging


class TestSettings:
    """Test Settings"""

    def test_defaults(self):
        assert settings.repository_max_workers >= 1
        assert settings.default_page_size >= 1
        assert get_settings() is settings

    def test_log_level_is_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_worker_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(repository_max_workers=0)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./data/env.db")
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "5")

        loaded = Settings()

        assert loaded.database_url == "sqlite:///./data/env.db"
        assert loaded.default_page_size == 5


class TestConfigureLogging:
    """Test configure_logging()"""

    def test_json_logs(self):
        configure_logging(level="INFO", json_logs=True)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_console_logs(self):
        configure_logging(level="warning", json_logs=False)

        assert structlog.is_configured()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
