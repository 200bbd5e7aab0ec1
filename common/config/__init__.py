"""Configuration helpers for the synthesis engine."""

from .settings import (
    DEFAULT_GROUP_ID,
    DEFAULT_VERSION,
    DEPENDENCY_VERSION,
    EngineSettings,
    clear_settings_cache,
    load_settings,
)

__all__ = [
    "DEFAULT_GROUP_ID",
    "DEFAULT_VERSION",
    "DEPENDENCY_VERSION",
    "EngineSettings",
    "clear_settings_cache",
    "load_settings",
]
