from __future__ import annotations

"""Application-wide logger and its handler setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOGGER_NAME = "pomodoro_clock"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

log = logging.getLogger(LOGGER_NAME)


def configure_logging(
    level: int | str = logging.INFO,
    log_dir: Path | None = None,
    console: bool = True,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and rotating-file handlers once; safe to call repeatedly."""
    log.setLevel(level)
    log.propagate = False
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler_name = f"{LOGGER_NAME}:console"
    if console and not any(h.get_name() == console_handler_name for h in log.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        log.addHandler(console_handler)

    file_handler_name = f"{LOGGER_NAME}:file"
    if log_dir is not None and not any(h.get_name() == file_handler_name for h in log.handlers):
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_dir / f"{LOGGER_NAME}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=False,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        file_handler.set_name(file_handler_name)
        log.addHandler(file_handler)

    return log
