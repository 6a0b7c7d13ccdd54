"""
Logging configuration for the staleness watchdog.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "stale"


def setup_logging(log_dir: Optional[Path] = None, level: str = "WARNING") -> logging.Logger:
    """Initialize the watchdog logger. Diagnostics never go to stdout."""
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    base_logger = logging.getLogger(LOGGER_NAME)
    base_logger.setLevel(getattr(logging, level.upper()))
    if not base_logger.handlers:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        base_logger.addHandler(stream_handler)

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            date_stamp = datetime.utcnow().strftime("%Y%m%d")

            file_handler = logging.FileHandler(log_dir / f"stale_log_{date_stamp}.log", encoding="utf-8")
            file_handler.setFormatter(formatter)
            base_logger.addHandler(file_handler)

            error_handler = logging.FileHandler(
                log_dir / f"stale_error_log_{date_stamp}.log", encoding="utf-8"
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            base_logger.addHandler(error_handler)
        base_logger.propagate = False

    return base_logger
