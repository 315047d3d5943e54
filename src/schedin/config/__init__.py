"""Config – 12-factor settings and loaders."""

from schedin.config.settings import DotenvSettingsLoader, EnvSettingsLoader, SchedinSettings, Settings, SettingsLoader
from schedin.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "SchedinSettings",
    "Settings",
    "SettingsLoader",
]
