"""Configuration package."""

from senseflow.config.settings import (
    AppSettings,
    Settings,
    SpeechSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "SpeechSettings",
    "get_settings",
    "validate_all_settings",
]
