"""Tests for core.settings module.

Covers:
- SpindleSettings defaults
- SPINDLE_* environment overrides and .env loading
- Field validation
- get_settings caching
"""

import pytest
from pydantic import ValidationError

from spindle.core.errors import ConfigError, SpindleError
from spindle.core.settings import SpindleSettings, get_settings


class TestSpindleSettingsDefaults:
    def test_default_log_level(self):
        assert SpindleSettings().log_level == "INFO"

    def test_default_log_json_is_auto(self):
        assert SpindleSettings().log_json is None

    def test_default_service_name(self):
        assert SpindleSettings().service_name == "spindle"

    def test_default_retry_times(self):
        assert SpindleSettings().retry_times == 3


class TestSpindleSettingsEnvOverride:
    def test_retry_times_from_env(self, monkeypatch):
        monkeypatch.setenv("SPINDLE_RETRY_TIMES", "7")
        assert SpindleSettings().retry_times == 7

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("SPINDLE_LOG_LEVEL", "debug")
        assert SpindleSettings().log_level == "DEBUG"

    def test_log_json_from_env(self, monkeypatch):
        monkeypatch.setenv("SPINDLE_LOG_JSON", "true")
        assert SpindleSettings().log_json is True

    def test_unprefixed_env_ignored(self, monkeypatch):
        monkeypatch.setenv("RETRY_TIMES", "9")
        assert SpindleSettings().retry_times == 3

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SPINDLE_SERVICE_NAME=worker\nUNRELATED=1\n")
        assert SpindleSettings().service_name == "worker"


class TestSpindleSettingsValidation:
    def test_rejects_zero_retry_times(self, monkeypatch):
        monkeypatch.setenv("SPINDLE_RETRY_TIMES", "0")
        with pytest.raises(ValidationError):
            SpindleSettings()

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            SpindleSettings(log_level="LOUD")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch):
        assert get_settings().retry_times == 3
        monkeypatch.setenv("SPINDLE_RETRY_TIMES", "4")
        assert get_settings().retry_times == 3
        get_settings.cache_clear()
        assert get_settings().retry_times == 4

    def test_invalid_env_raises_config_error(self, monkeypatch):
        monkeypatch.setenv("SPINDLE_RETRY_TIMES", "0")
        with pytest.raises(ConfigError) as exc_info:
            get_settings()
        assert isinstance(exc_info.value, SpindleError)
        assert isinstance(exc_info.value.cause, ValidationError)
