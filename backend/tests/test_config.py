"""
Tests for centralized configuration.
"""
import pytest
import os
from sheetstats.core.config import Settings, get_settings, reload_settings


def test_settings_defaults():
    """Test that settings have sensible defaults."""
    settings = Settings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "text"
    assert settings.narrative_enabled is True
    assert settings.groq_model == "llama-3.1-8b-instant"
    assert settings.ai_timeout_seconds == 15.0
    assert settings.ai_max_tokens == 400


def test_settings_from_env(monkeypatch):
    """Test loading settings from environment variables."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    monkeypatch.setenv("AI_MAX_TOKENS", "800")
    monkeypatch.setenv("NARRATIVE_ENABLED", "yes")

    # Reload to pick up new env vars
    settings = reload_settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.ai_max_tokens == 800
    assert settings.narrative_enabled is True


def test_narrative_disabled_from_env():
    """The shared fixture switches the collaborator off."""
    assert os.environ["NARRATIVE_ENABLED"] == "false"
    assert get_settings().narrative_enabled is False


def test_settings_validation():
    """Test that settings validate input ranges."""
    with pytest.raises(ValueError):
        Settings(ai_timeout_seconds=0)  # Below minimum

    with pytest.raises(ValueError):
        Settings(ai_max_tokens=10000)  # Above maximum

    with pytest.raises(ValueError):
        Settings(log_level="INVALID")  # Invalid log level

    with pytest.raises(ValueError):
        Settings(log_format="xml")


def test_settings_singleton():
    """Test that get_settings returns singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2
