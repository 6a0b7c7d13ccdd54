"""
Utility helpers for the staleness watchdog.
"""

from .activity import ActivityTracker, ClockError, timestamp_ms
from .logging_setup import LOGGER_NAME, setup_logging

__all__ = [
    "setup_logging",
    "LOGGER_NAME",
    "ActivityTracker",
    "ClockError",
    "timestamp_ms",
]
