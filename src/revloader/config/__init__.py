"""
Configuration management for the revision loader.

This module provides a centralized configuration system that:
- Reads settings from the environment and an optional ``.env`` file
- Provides type-safe configuration access
- Validates configuration values
"""

from .config_manager import ConfigManager, get_config, reload_config
from .settings import LoaderSettings, LoggingSettings

__all__ = ["ConfigManager", "get_config", "reload_config", "LoaderSettings", "LoggingSettings"]
