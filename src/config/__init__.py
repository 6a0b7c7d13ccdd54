"""
Configuration package for the staleness watchdog.
"""

from .settings import DEFAULT_MESSAGE, ConfigError, StaleConfig

__all__ = ["StaleConfig", "ConfigError", "DEFAULT_MESSAGE"]
