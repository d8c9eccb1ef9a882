"""Configuration package."""

from finance_manager.config.settings import (
    AdviceSettings,
    AppSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AdviceSettings",
    "AppSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
