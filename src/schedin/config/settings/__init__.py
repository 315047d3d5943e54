"""Config settings – 12-factor env-based configuration."""
from schedin.config.settings.base import SchedinSettings, Settings
from schedin.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SchedinSettings", "Settings", "SettingsLoader"]
