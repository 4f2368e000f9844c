"""Configuration management for flightcontrol."""

from flightcontrol.core.config.loader import DEFAULT_CONFIG_PATHS, ConfigLoader
from flightcontrol.core.config.settings import (
    BuildSettings,
    GitSettings,
    LoggingSettings,
    Settings,
    WorkspaceSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "ConfigLoader",
    "Settings",
    "BuildSettings",
    "WorkspaceSettings",
    "GitSettings",
    "LoggingSettings",
    "get_settings",
]
