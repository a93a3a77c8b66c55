"""Unit tests for Settings.

Tests cover:
- Defaults for serving a bare checkout
- Environment variable loading
- Validators (log level, trailing slashes, docs path)
- get_settings() caching
"""

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings
from src.core.enums import Environment


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default configuration values."""

    def test_defaults(self, monkeypatch):
        for name in (
            "ENVIRONMENT",
            "OPENAPI_FILE_PATH",
            "CONTROLLERS_PACKAGE",
            "LOG_LEVEL",
            "VALIDATE_RESPONSES",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.openapi_file_path == "openapi.yaml"
        assert settings.controllers_package == "controllers"
        assert settings.openapi_url_path == "/docs"
        assert settings.validate_responses is True
        assert settings.log_level == "INFO"
        assert settings.is_development is True
        assert settings.uses_json_logs is False


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test loading from environment variables."""

    def test_environment_variables_are_read(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("OPENAPI_FILE_PATH", "/srv/api/openapi.json")
        monkeypatch.setenv("CONTROLLERS_PACKAGE", "app.controllers")
        monkeypatch.setenv("VALIDATE_RESPONSES", "false")

        settings = Settings()

        assert settings.environment == Environment.PRODUCTION
        assert settings.openapi_file_path == "/srv/api/openapi.json"
        assert settings.controllers_package == "app.controllers"
        assert settings.validate_responses is False
        assert settings.uses_json_logs is True

    def test_keyword_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("CONTROLLERS_PACKAGE", "from.env")

        settings = Settings(controllers_package="from.kwargs")

        assert settings.controllers_package == "from.kwargs"


@pytest.mark.unit
class TestSettingsValidators:
    """Test field validators."""

    def test_log_level_is_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_api_base_url_trailing_slash_removed(self):
        assert Settings(api_base_url="https://api.example.com/").api_base_url == (
            "https://api.example.com"
        )

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("docs", "/docs"), ("/docs/", "/docs"), ("/api/docs", "/api/docs")],
    )
    def test_docs_path_is_normalized(self, value, expected):
        assert Settings(openapi_url_path=value).openapi_url_path == expected

    def test_unknown_environment_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(environment="staging")


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() caching."""

    def test_returns_cached_instance(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()

        get_settings.cache_clear()
