"""
Tests for settings parsing and CORS origin helpers.
"""
import pytest
from pydantic import ValidationError

from beaverdoc.config import (
    Settings,
    DEV_CORS_ORIGINS,
    get_cors_origins,
    is_allowed_origin,
)


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.max_upload_bytes == 10 * 1024 * 1024
        assert settings.product_label == "BeaverDoc"
        assert settings.stamp_locale == "fr"
        assert settings.stamp_timezone == "Europe/Paris"

    @pytest.mark.parametrize("raw,expected", [
        ('["https://a.example","https://b.example"]', ["https://a.example", "https://b.example"]),
        ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
        ("https://a.example;https://b.example;", ["https://a.example", "https://b.example"]),
        ("", []),
    ])
    def test_allowed_origins_parsing(self, raw, expected):
        assert Settings(_env_file=None, ALLOWED_ORIGINS=raw).allowed_origins == expected

    def test_locale_is_normalized(self):
        assert Settings(_env_file=None, STAMP_LOCALE=" EN ").stamp_locale == "en"

    def test_unsupported_locale(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, STAMP_LOCALE="xx")

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, STAMP_TIMEZONE="Mars/Olympus")

    def test_upload_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, MAX_UPLOAD_BYTES=0)


class TestCorsOrigins:
    """Tests for CORS origin helpers."""

    def test_development_includes_dev_origins(self, monkeypatch):
        settings = Settings(_env_file=None, ENVIRONMENT="development", ALLOWED_ORIGINS="https://app.example")
        monkeypatch.setattr("beaverdoc.config.get_settings", lambda: settings)

        origins = get_cors_origins()
        assert "https://app.example" in origins
        assert set(DEV_CORS_ORIGINS) <= set(origins)
        assert is_allowed_origin("http://localhost:8080")

    def test_production_only_configured(self, monkeypatch):
        settings = Settings(_env_file=None, ENVIRONMENT="production", ALLOWED_ORIGINS="https://app.example")
        monkeypatch.setattr("beaverdoc.config.get_settings", lambda: settings)

        assert get_cors_origins() == ["https://app.example"]
        assert is_allowed_origin("https://app.example")
        assert not is_allowed_origin("http://localhost:5173")
        assert not is_allowed_origin("")
