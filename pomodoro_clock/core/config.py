from __future__ import annotations

"""Runtime configuration read from environment variables with safe defaults."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pomodoro_clock.core.logger import log


INTERVAL_PRESETS_MINUTES = (5, 15, 30, 45, 60, 75, 90, 105)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class AppConfig:
    audio_enabled: bool = False
    auto_cycle: bool = False
    work_minutes: float = 60
    rest_minutes: float = 15
    tick_interval: float = 1.0
    log_level: str = "INFO"
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.work_minutes <= 0 or self.rest_minutes <= 0:
            raise ValueError("Durations must be positive")
        if self.tick_interval <= 0:
            raise ValueError("Tick interval must be positive")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @property
    def work_seconds(self) -> float:
        return self.work_minutes * 60

    @property
    def rest_seconds(self) -> float:
        return self.rest_minutes * 60


_DEFAULTS = AppConfig()


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean: {raw!r}")


def _parse_positive(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise ValueError(f"Not a positive number: {raw!r}")
    return value


def _parse_level(raw: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {raw!r}")
    return level


# field name -> (environment variable, parser)
_ENV_FIELDS = {
    "audio_enabled": ("POMODORO_AUDIO", _parse_bool),
    "auto_cycle": ("POMODORO_AUTO_CYCLE", _parse_bool),
    "work_minutes": ("POMODORO_WORK_MINUTES", _parse_positive),
    "rest_minutes": ("POMODORO_REST_MINUTES", _parse_positive),
    "tick_interval": ("POMODORO_TICK_INTERVAL", _parse_positive),
    "log_level": ("POMODORO_LOG_LEVEL", _parse_level),
    "log_dir": ("POMODORO_LOG_DIR", lambda raw: Path(raw).expanduser()),
}


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build an AppConfig, falling back to defaults for values that fail to parse."""
    if environ is None:
        environ = os.environ

    values: dict[str, Any] = {}
    defaulted_values = set()
    for field_name, (env_name, parse) in _ENV_FIELDS.items():
        raw = environ.get(env_name)
        if raw is None:
            continue
        try:
            values[field_name] = parse(raw)
        except ValueError:
            defaulted_values.add(env_name)
            values[field_name] = getattr(_DEFAULTS, field_name)

    if defaulted_values:
        log.warning(f"Loaded configuration, but with invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
    config = AppConfig(**values)
    log.debug(f"Loaded configuration: {config}")
    return config
