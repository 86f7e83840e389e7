"""Tests for settings and component wiring."""

import pytest

from senseflow.config import AppSettings, SpeechSettings, get_settings, validate_all_settings
from senseflow.models.account import AccountKind
from senseflow.models.audit import AuditEventType
from senseflow.orchestrator import create_app_components


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test away from any local .env file and SENSEFLOW_ variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "SENSEFLOW_DEBUG_MODE",
        "SENSEFLOW_LOG_LEVEL",
        "SENSEFLOW_LOG_FORMAT",
        "SENSEFLOW_ACCOUNT_KIND",
        "SENSEFLOW_COMMAND_IGNORE_CASE",
        "SENSEFLOW_AUDIT_TRAIL_SIZE",
        "SPEECH_PROMPT",
        "SPEECH_LANGUAGE_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        """x"""
        settings = AppSettings()
        assert settings.account_kind == AccountKind.CHECKING
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.command_ignore_case is False
        assert settings.audit_trail_size == 200

    def test_from_environment(self, monkeypatch):
        """Test SENSEFLOW_ variables override the defaults."""
        monkeypatch.setenv("SENSEFLOW_ACCOUNT_KIND", "credit")
        monkeypatch.setenv("SENSEFLOW_LOG_LEVEL", "debug")
        monkeypatch.setenv("SENSEFLOW_COMMAND_IGNORE_CASE", "true")

        settings = AppSettings()
        assert settings.account_kind == AccountKind.CREDIT
        assert settings.log_level == "DEBUG"
        assert settings.command_ignore_case is True

    def test_from_env_file(self, tmp_path):
        """Test values are read from a local .env file."""
        (tmp_path / ".env").write_text("SENSEFLOW_AUDIT_TRAIL_SIZE=5\n")
        assert AppSettings().audit_trail_size == 5

    def test_unknown_log_level_rejected(self, monkeypatch):
        """Test an unknown log level name fails validation."""
        monkeypatch.setenv("SENSEFLOW_LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError):
            AppSettings()

    def test_unknown_account_kind_rejected(self, monkeypatch):
        """Test only checking and credit accounts can be configured."""
        monkeypatch.setenv("SENSEFLOW_ACCOUNT_KIND", "savings")
        with pytest.raises(ValueError):
            AppSettings()

    def test_debug_mode_overrides_logging(self, monkeypatch):
        """Test debug mode switches to DEBUG level and console output."""
        monkeypatch.setenv("SENSEFLOW_DEBUG_MODE", "true")
        monkeypatch.setenv("SENSEFLOW_LOG_LEVEL", "warning")

        settings = AppSettings()
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "DEBUG"
        assert settings.effective_log_format == "console"

    def test_effective_logging_without_debug_mode(self):
        """Test the configured level and format are used as they are."""
        settings = AppSettings()
        assert settings.effective_log_level == "INFO"
        assert settings.effective_log_format == "json"


class TestSpeechSettings:
    """Tests for SpeechSettings."""

    def test_defaults(self):
        """Test the default prompt and language model."""
        settings = SpeechSettings()
        assert settings.prompt == "Speak now"
        assert settings.language_model == "free_form"

    def test_invalid_language_model(self, monkeypatch):
        """Test the language model is limited to known values."""
        monkeypatch.setenv("SPEECH_LANGUAGE_MODEL", "dictation")
        with pytest.raises(ValueError):
            SpeechSettings()


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    def test_all_valid(self):
        """Test every section validates with defaults."""
        assert validate_all_settings() == {"app": True, "speech": True}

    def test_reports_invalid_section(self, monkeypatch):
        """Test an invalid section is reported with its error."""
        monkeypatch.setenv("SENSEFLOW_AUDIT_TRAIL_SIZE", "0")
        status = validate_all_settings()
        assert status["app"] is False
        assert "app_error" in status
        assert status["speech"] is True


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_builds_session_from_settings(self, monkeypatch):
        """Test the factory wires settings into the session."""
        monkeypatch.setenv("SENSEFLOW_ACCOUNT_KIND", "credit")
        monkeypatch.setenv("SENSEFLOW_AUDIT_TRAIL_SIZE", "10")
        monkeypatch.setenv("SENSEFLOW_COMMAND_IGNORE_CASE", "true")
        monkeypatch.setenv("SENSEFLOW_LOG_FORMAT", "console")

        session, trail, audit_logger = create_app_components()

        assert session.account.kind == AccountKind.CREDIT
        assert session.account.balance == 0
        assert trail.max_events == 10
        assert audit_logger.trail is trail
        assert trail.get_events_by_type(AuditEventType.ACCOUNT_OPENED)

        session.handle_voice_command("Deposit 5")
        assert session.last_message == "Deposit failed: Account is already paid off"
