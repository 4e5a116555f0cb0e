"""Config – 12-factor settings and loaders."""

from stardispatch.config.settings import DispatchSettings, DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from stardispatch.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DispatchSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
