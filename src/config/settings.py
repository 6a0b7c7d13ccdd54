"""
Configuration loader and validation for the staleness watchdog.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

ENV_CONFIG_PATH = "STALE_CONFIG"
DEFAULT_MESSAGE = "[{now}] stream is stale since {staletime}"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when the watchdog configuration is invalid."""


@dataclass(frozen=True)
class StaleConfig:
    """Validated settings handed to the monitor and the reader."""

    delay_seconds: int
    passthrough: bool = False
    message: str = DEFAULT_MESSAGE
    exit_code: Optional[int] = None
    no_rearm: bool = False
    time_format: Optional[str] = None
    log_level: str = "WARNING"
    log_dir: Optional[Path] = None

    @property
    def threshold_ms(self) -> int:
        return self.delay_seconds * 1000

    @classmethod
    def from_sources(
        cls,
        overrides: Mapping[str, Any],
        config_path: Optional[Path] = None,
    ) -> "StaleConfig":
        """Merge a YAML file (if any) with command-line overrides and validate."""
        if config_path is None:
            env_value = os.environ.get(ENV_CONFIG_PATH)
            config_path = Path(env_value) if env_value else None
        raw: Dict[str, Any] = load_yaml(config_path) if config_path is not None else {}
        logging_section = raw.get("logging") or {}
        if not isinstance(logging_section, dict):
            raise ConfigError("'logging' must be a mapping")

        def pick(key: str, file_value: Any) -> Any:
            value = overrides.get(key)
            return file_value if value is None else value

        delay = _parse_delay(pick("delay", raw.get("delay")))
        exit_code = _parse_exit_code(pick("exit", raw.get("exit")))
        message = pick("message", raw.get("message"))
        if message is None:
            message = DEFAULT_MESSAGE
        log_level = str(pick("log_level", logging_section.get("level")) or "WARNING").upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {log_level}")
        log_dir_value = pick("log_dir", logging_section.get("dir"))
        log_dir = None
        if log_dir_value:
            log_dir = Path(log_dir_value).expanduser()
            if not log_dir.is_absolute() and config_path is not None and overrides.get("log_dir") is None:
                log_dir = (config_path.parent / log_dir).resolve()
        time_format = pick("time_format", raw.get("time_format"))
        return cls(
            delay_seconds=delay,
            passthrough=bool(overrides.get("passthrough") or raw.get("passthrough", False)),
            message=str(message),
            exit_code=exit_code,
            no_rearm=bool(overrides.get("no_rearm") or raw.get("no_rearm", False)),
            time_format=str(time_format) if time_format else None,
            log_level=log_level,
            log_dir=log_dir,
        )


def load_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping from disk."""
    path = path.expanduser()
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _parse_delay(value: Any) -> int:
    if value is None:
        raise ConfigError("A delay is required (--delay SECONDS)")
    if isinstance(value, bool):
        raise ConfigError("Delay should be a positive integer")
    try:
        delay = int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Delay should be a positive integer, got {value!r}") from exc
    if delay <= 0:
        raise ConfigError(f"Delay should be a positive integer, got {value!r}")
    return delay


def _parse_exit_code(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError("Exit code should be an integer")
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"Exit code should be an integer, got {value!r}") from exc
