"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    PolicySettings,
    ReattemptSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "PolicySettings",
    "ReattemptSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
]
