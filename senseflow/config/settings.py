"""
Configuration Management for SenseFlow

Uses pydantic-settings for type-safe configuration from environment variables
and an optional .env file.

DESIGN DECISION: All configuration is centralized here and validated at
startup, before the account is opened.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from senseflow.models.account import AccountKind


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from SENSEFLOW_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SENSEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (DEBUG level, console log output)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="json",
        pattern="^(json|console)$",
        description="Log renderer: json or console"
    )

    # Ledger
    account_kind: AccountKind = Field(
        default=AccountKind.CHECKING,
        description="Kind of account opened for each session"
    )

    # Voice commands
    command_ignore_case: bool = Field(
        default=False,
        description="Match 'withdraw'/'deposit' regardless of case"
    )

    # Session activity history
    audit_trail_size: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="Number of audit events kept in memory per session"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def effective_log_level(self) -> str:
        """DEBUG in debug mode, otherwise the configured level."""
        return "DEBUG" if self.debug_mode else self.log_level

    @property
    def effective_log_format(self) -> str:
        """Human-readable console output in debug mode."""
        return "console" if self.debug_mode else self.log_format


class SpeechSettings(BaseSettings):
    """Speech recognition configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPEECH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    prompt: str = Field(
        default="Speak now",
        min_length=1,
        max_length=100,
        description="Prompt shown while listening"
    )
    language_model: str = Field(
        default="free_form",
        pattern="^(free_form|web_search)$",
        description="Recognizer language model"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def speech(self) -> SpeechSettings:
        return SpeechSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<setting_name>_error" entry for each invalid section.
    """
    results = {}

    settings = get_settings()

    sections = {
        "app": lambda: settings.app,
        "speech": lambda: settings.speech,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
