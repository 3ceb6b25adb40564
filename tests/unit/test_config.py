"""Tests for configuration validation."""

import pytest

from src.core.config import DEFAULT_APPS_SCRIPT_URL, Settings, constants


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(logfire_token="lf-token")

    result = settings.require_credential("logfire_token", "Logfire")

    assert result == "lf-token"


def test_require_credential_with_none_raises_error() -> None:
    """Test require_credential raises ValueError when credential is None."""
    settings = Settings(logfire_token=None)

    with pytest.raises(ValueError, match="Logfire credential not configured"):
        settings.require_credential("logfire_token", "Logfire")


def test_require_credential_error_message_includes_field_name() -> None:
    """Test error message includes the environment variable name."""
    settings = Settings(sheet_script_url="")

    with pytest.raises(ValueError, match="SHEET_SCRIPT_URL"):
        settings.require_credential("sheet_script_url", "Apps Script")


def test_script_url_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the backend endpoint can be overridden through the environment."""
    monkeypatch.setenv("SHEET_SCRIPT_URL", "https://script.google.com/macros/s/env/exec")

    settings = Settings()

    assert settings.sheet_script_url == "https://script.google.com/macros/s/env/exec"


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test defaults when nothing is configured."""
    monkeypatch.delenv("SHEET_SCRIPT_URL", raising=False)
    monkeypatch.delenv("RESYNC_DELAY_SECONDS", raising=False)

    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    assert settings.sheet_script_url == DEFAULT_APPS_SCRIPT_URL
    assert settings.resync_delay_seconds == 3.0
    assert settings.sheet_script_url.startswith(constants.SCRIPT_URL_PREFIX)
