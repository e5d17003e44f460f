"""Unit tests for config.py"""

import pytest

import config
from config import Settings, get_settings, reset_settings, validate_required_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SUPER_ADMIN_PASSWORD", raising=False)
        monkeypatch.delenv("IMPERSONATION_TTL_MINUTES", raising=False)
        settings = Settings(_env_file=None)
        assert settings.impersonation_ttl_minutes == 30
        assert settings.operator_session_ttl_hours == 8
        assert settings.session_token_bytes == 32
        assert settings.trust_promotion_streak == 5
        assert settings.trust_demotion_rejections == 2

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("IMPERSONATION_TTL_MINUTES", "15")
        monkeypatch.setenv("SUPER_ADMIN_EMAIL", "ops@mytaek.com")
        settings = get_settings()
        assert settings.impersonation_ttl_minutes == 15
        assert settings.super_admin_email == "ops@mytaek.com"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestValidateRequiredSettings:

    def test_development_without_password_is_allowed(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", Settings(environment="development", super_admin_password=""))
        assert validate_required_settings() is True

    def test_production_requires_password(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", Settings(environment="production", super_admin_password=""))
        with pytest.raises(ValueError, match="SUPER_ADMIN_PASSWORD"):
            validate_required_settings()

    def test_ttl_must_be_positive(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", Settings(impersonation_ttl_minutes=0))
        with pytest.raises(ValueError, match="TTL"):
            validate_required_settings()

    def test_trust_thresholds_must_be_positive(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", Settings(trust_promotion_streak=0))
        with pytest.raises(ValueError, match="Trust"):
            validate_required_settings()
