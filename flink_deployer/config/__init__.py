"""Configuration package for runtime settings and startup validation."""

from .settings import DeployerSettings, SettingsLoadError, config_load_settings

__all__ = ["DeployerSettings", "SettingsLoadError", "config_load_settings"]
