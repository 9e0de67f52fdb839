"""Configuration management for dcsync."""

from .settings import (
    SETTINGS_FILE,
    SyncSettings,
    discover_settings_path,
    get_settings,
    load_bundled_settings,
    load_settings,
)

__all__ = [
    "SETTINGS_FILE",
    "SyncSettings",
    "discover_settings_path",
    "get_settings",
    "load_bundled_settings",
    "load_settings",
]
