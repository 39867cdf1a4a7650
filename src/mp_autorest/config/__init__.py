"""Config – 12-factor settings and loaders."""

from mp_autorest.config.settings import EnvSettingsLoader, Settings, SettingsLoader
from mp_autorest.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
