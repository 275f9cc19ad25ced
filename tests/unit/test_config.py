"""
Unit tests for settings and startup validation.
"""
import pytest
from goaltracker.config import DEFAULT_SECRET_KEY, Settings, get_settings


class TestSettings:

    @pytest.mark.unit
    def test_test_environment_is_loaded(self):
        settings = get_settings()
        assert settings.is_sqlite
        assert settings.ENVIRONMENT == "test"
        assert settings.is_openai_configured is False

    @pytest.mark.unit
    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    @pytest.mark.unit
    def test_defaults(self):
        settings = Settings()
        assert settings.ALGORITHM == "HS256"
        assert settings.ACCESS_TOKEN_EXPIRE_MINUTES > 0
        assert settings.PASSWORD_MIN_LENGTH == 6

    @pytest.mark.unit
    def test_cors_config_exposes_request_id(self):
        assert "X-Request-ID" in Settings().cors_config["expose_headers"]

    @pytest.mark.unit
    def test_openai_configured_with_key(self):
        settings = Settings()
        settings.OPENAI_API_KEY = "sk-test"
        assert settings.is_openai_configured


class TestValidateConfiguration:

    @pytest.mark.unit
    def test_test_settings_are_valid(self):
        assert Settings().validate_configuration() == []

    @pytest.mark.unit
    def test_default_secret_rejected_in_production(self):
        settings = Settings()
        settings.SECRET_KEY = DEFAULT_SECRET_KEY
        settings.ENVIRONMENT = "production"
        assert "SECRET_KEY must be changed in production" in settings.validate_configuration()

    @pytest.mark.unit
    def test_default_secret_allowed_in_development(self):
        settings = Settings()
        settings.SECRET_KEY = DEFAULT_SECRET_KEY
        settings.ENVIRONMENT = "development"
        assert settings.validate_configuration() == []

    @pytest.mark.unit
    def test_short_secret_and_bad_numbers(self):
        settings = Settings()
        settings.SECRET_KEY = "short"
        settings.ACCESS_TOKEN_EXPIRE_MINUTES = 0
        settings.PASSWORD_MIN_LENGTH = 0

        issues = settings.validate_configuration()

        assert len(issues) == 3
