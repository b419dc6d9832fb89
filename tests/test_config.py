import logging
from pathlib import Path

import pytest

from pomodoro_clock.core.config import INTERVAL_PRESETS_MINUTES, AppConfig, load_config
from pomodoro_clock.core.logger import LOGGER_NAME, configure_logging


def test_defaults_without_environment() -> None:
    config = load_config({})

    assert config == AppConfig()
    assert config.audio_enabled is False
    assert config.auto_cycle is False
    assert config.work_seconds == 60 * 60
    assert config.rest_seconds == 15 * 60
    assert config.tick_interval == 1.0
    assert INTERVAL_PRESETS_MINUTES == (5, 15, 30, 45, 60, 75, 90, 105)


def test_values_read_from_environment(tmp_path) -> None:
    config = load_config(
        {
            "POMODORO_AUDIO": "yes",
            "POMODORO_AUTO_CYCLE": "1",
            "POMODORO_WORK_MINUTES": "25",
            "POMODORO_REST_MINUTES": "5",
            "POMODORO_TICK_INTERVAL": "0.5",
            "POMODORO_LOG_LEVEL": "debug",
            "POMODORO_LOG_DIR": str(tmp_path),
        }
    )

    assert config.audio_enabled is True
    assert config.auto_cycle is True
    assert config.work_seconds == 25 * 60
    assert config.rest_seconds == 5 * 60
    assert config.tick_interval == 0.5
    assert config.log_level == "DEBUG"
    assert config.log_dir == Path(tmp_path)


def test_invalid_values_fall_back_to_defaults(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        config = load_config(
            {
                "POMODORO_AUDIO": "maybe",
                "POMODORO_WORK_MINUTES": "-10",
                "POMODORO_LOG_LEVEL": "LOUD",
            }
        )

    assert config.audio_enabled is False
    assert config.work_minutes == 60
    assert config.log_level == "INFO"
    assert "POMODORO_AUDIO" in caplog.text
    assert "POMODORO_WORK_MINUTES" in caplog.text


def test_config_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        AppConfig(rest_minutes=0)
    with pytest.raises(ValueError):
        AppConfig(tick_interval=-1)


def test_configure_logging_is_idempotent(tmp_path) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    before = list(logger.handlers)
    try:
        configure_logging(level="DEBUG", log_dir=tmp_path, console=True)
        configure_logging(level="DEBUG", log_dir=tmp_path, console=True)

        names = [h.get_name() for h in logger.handlers if h not in before]
        assert sorted(names) == [f"{LOGGER_NAME}:console", f"{LOGGER_NAME}:file"]
        assert (tmp_path / f"{LOGGER_NAME}.log").exists()
    finally:
        for handler in list(logger.handlers):
            if handler not in before:
                logger.removeHandler(handler)
                handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
