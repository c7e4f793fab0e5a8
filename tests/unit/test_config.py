"""Tests for configuration validation."""

import pytest
from pydantic import ValidationError

from src.core.config import Settings


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(logfire_token="token123")

    result = settings.require_credential("logfire_token", "Logfire")

    assert result == "token123"


def test_require_credential_with_none_raises_error() -> None:
    """Test require_credential raises ValueError when credential is None."""
    settings = Settings(logfire_token=None)

    with pytest.raises(ValueError, match="Logfire credential not configured"):
        settings.require_credential("logfire_token", "Logfire")


def test_require_credential_error_message_includes_field_name() -> None:
    """Test error message includes the environment variable name."""
    settings = Settings(logfire_token="")

    with pytest.raises(ValueError, match="LOGFIRE_TOKEN"):
        settings.require_credential("logfire_token", "Logfire")


def test_default_horizons() -> None:
    """Test default due-soon horizons per entity kind."""
    settings = Settings()

    assert settings.event_due_soon_days == 7
    assert settings.chore_due_soon_days == 7
    assert settings.vaccine_due_soon_days == 30
    assert settings.reminder_due_soon_hours == 24


def test_settings_read_from_environment(monkeypatch) -> None:
    """Test settings are loaded from environment variables."""
    monkeypatch.setenv("DEFAULT_MAX_MEMBERS", "4")
    monkeypatch.setenv("INVITE_CODE_MAX_ATTEMPTS", "3")

    settings = Settings()

    assert settings.default_max_members == 4
    assert settings.invite_code_max_attempts == 3


def test_max_members_bounds() -> None:
    """Test default_max_members stays within 2..20."""
    with pytest.raises(ValidationError, match="default_max_members"):
        Settings(default_max_members=1)

    with pytest.raises(ValidationError, match="default_max_members"):
        Settings(default_max_members=21)
