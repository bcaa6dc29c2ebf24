"""Configuration management module."""

from .settings import (
    PROVIDER_NAMES,
    AppSettings,
    JudgeSettings,
    ProviderSettings,
    get_settings,
)

__all__ = [
    "PROVIDER_NAMES",
    "AppSettings",
    "JudgeSettings",
    "ProviderSettings",
    "get_settings",
]
