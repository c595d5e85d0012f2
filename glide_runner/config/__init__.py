"""Configuration package for runner settings and startup validation."""

from .settings import (
    CONFIG_FILE_ENVIRONMENT_VARIABLE,
    DirectorySettings,
    DockingSettings,
    JobsSettings,
    MarkerSettings,
    RunnerSettings,
    SchrodingerSettings,
    SettingsLoadError,
    config_load_settings,
    config_resolve_file_path,
    config_resolve_home_relative,
)

__all__ = [
    "CONFIG_FILE_ENVIRONMENT_VARIABLE",
    "DirectorySettings",
    "DockingSettings",
    "JobsSettings",
    "MarkerSettings",
    "RunnerSettings",
    "SchrodingerSettings",
    "SettingsLoadError",
    "config_load_settings",
    "config_resolve_file_path",
    "config_resolve_home_relative",
]
