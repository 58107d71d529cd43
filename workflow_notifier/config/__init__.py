"""Configuration package for runtime settings and startup validation."""

from .settings import NotifierSettings, SettingsLoadError, config_load_settings

__all__ = ["NotifierSettings", "SettingsLoadError", "config_load_settings"]
