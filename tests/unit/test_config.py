"""Unit tests for environment validation."""

import logging

import pytest
from pydantic import ValidationError

from arcana.config import Settings, format_validation_errors, load_settings


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a developer's .env out of validation tests."""
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Tests for Settings validation and section grouping."""

    def test_valid_environment_builds_sections(self):
        """Flat variables should be grouped into nested sections."""
        settings = Settings()

        assert settings.auth.jwt_issuer == "persona-arcana-api"
        assert settings.auth.jwt_audience == "persona-arcana-mobile"
        assert settings.auth.jwt_expiry_days == 30
        assert settings.auth.session_cookie_name == "persona-arcana-session"
        assert settings.auth.default_mobile_redirect_uri == "personaarcana://auth"
        assert settings.auth.google.callback_url == (
            "http://localhost:3000/auth/google/callback"
        )
        assert settings.storage.region == "nyc3"
        assert settings.upload.allowed_file_types == [
            "image/jpeg",
            "image/png",
            "image/webp",
        ]

    def test_allowed_origins_split_on_commas(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

        settings = Settings()

        assert settings.security.allowed_origins == [
            "https://a.example",
            "https://b.example",
        ]

    def test_cookie_domain_ignored_outside_production(self, monkeypatch):
        monkeypatch.setenv("COOKIE_DOMAIN", ".personaarcana.app")

        assert Settings().auth.cookie_domain is None

    def test_cookie_domain_applied_in_production(self, monkeypatch):
        monkeypatch.setenv("COOKIE_DOMAIN", ".personaarcana.app")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("HOST", "api.personaarcana.app")

        settings = Settings()

        assert settings.auth.cookie_domain == ".personaarcana.app"
        assert settings.auth.google.callback_url == (
            "https://api.personaarcana.app/auth/google/callback"
        )

    @pytest.mark.parametrize(
        "variable,value",
        [
            ("JWT_SECRET", "too-short"),
            ("SESSION_SECRET", "too-short"),
            ("GOOGLE_CLIENT_ID", "123456.example.com"),
            ("GOOGLE_CLIENT_SECRET", "short"),
            ("DATABASE_URL", "mysql://localhost/arcana"),
            ("SPACES_ENDPOINT", "http://nyc3.digitaloceanspaces.com"),
            ("SPACES_BUCKET", "Invalid_Bucket"),
            ("SPACES_ACCESS_KEY", "TOOSHORT"),
            ("SPACES_SECRET_KEY", "short"),
            ("SPACES_REGION", "mars1"),
            ("ALLOWED_ORIGINS", "localhost:3000"),
        ],
    )
    def test_invalid_value_is_rejected(self, monkeypatch, variable, value):
        """Each shape rule should reject a bad value, naming the variable."""
        monkeypatch.setenv(variable, value)

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        messages = format_validation_errors(exc_info.value)
        assert any(message.startswith(f"{variable}:") for message in messages)


class TestLoadSettings:
    """Tests for load_settings startup behavior."""

    def test_missing_jwt_secret_exits_non_zero(self, monkeypatch, caplog):
        """Startup must stop and name the missing variable."""
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with caplog.at_level(logging.ERROR, logger="arcana.config"):
            with pytest.raises(SystemExit) as exc_info:
                load_settings()

        assert exc_info.value.code == 1
        assert "JWT_SECRET: is required" in caplog.text

    def test_all_violations_are_reported(self, monkeypatch, caplog):
        """Every bad variable is reported, not just the first."""
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.setenv("SESSION_SECRET", "short")
        monkeypatch.setenv("SPACES_REGION", "mars1")

        with caplog.at_level(logging.ERROR, logger="arcana.config"):
            with pytest.raises(SystemExit):
                load_settings()

        assert "3 error(s) found" in caplog.text
        assert "JWT_SECRET" in caplog.text
        assert "SESSION_SECRET" in caplog.text
        assert "SPACES_REGION" in caplog.text

    def test_secret_values_are_not_logged(self, monkeypatch, caplog):
        monkeypatch.setenv("JWT_SECRET", "leaky-but-short")

        with caplog.at_level(logging.ERROR, logger="arcana.config"):
            with pytest.raises(SystemExit):
                load_settings()

        assert "leaky-but-short" not in caplog.text
