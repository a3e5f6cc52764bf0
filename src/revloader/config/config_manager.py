"""
Configuration manager for the revision loader.

This module provides a single place to load and cache LoaderSettings.
"""

from typing import Any

from .settings import LoaderSettings


class ConfigManager:
    """Manages configuration loading and access."""

    def __init__(self, **overrides: Any):
        """Initialize the configuration manager.

        Args:
            **overrides: Field values that take precedence over the environment
        """
        self._overrides = overrides
        self._settings: LoaderSettings | None = None

    def load_config(self) -> LoaderSettings:
        """Load configuration from the environment and ``.env``.

        Returns:
            LoaderSettings object with loaded configuration

        Raises:
            pydantic.ValidationError: If a value fails validation
        """
        if self._settings is not None:
            return self._settings

        self._settings = LoaderSettings(**self._overrides)
        return self._settings

    def get_config(self) -> LoaderSettings:
        """Get the current configuration."""
        if self._settings is None:
            return self.load_config()
        return self._settings

    def reload_config(self) -> LoaderSettings:
        """Reload configuration, discarding the cached settings."""
        self._settings = None
        return self.load_config()

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration as a dictionary."""
        return self.get_config().logging.model_dump()


# Global configuration manager instance
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> LoaderSettings:
    """Get the loader configuration."""
    return get_config_manager().get_config()


def reload_config() -> LoaderSettings:
    """Reload the loader configuration."""
    return get_config_manager().reload_config()
