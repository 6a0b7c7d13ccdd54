"""
Staleness watchdog for piped process output.
"""

__version__ = "0.1.0"
