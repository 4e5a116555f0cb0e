"""Config settings – 12-factor env-based configuration."""
from stardispatch.config.settings.base import Settings
from stardispatch.config.settings.dispatch import SUBSTRATES, DispatchSettings
from stardispatch.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "SUBSTRATES",
    "DispatchSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
]
