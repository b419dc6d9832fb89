from __future__ import annotations

"""Application entry point.

Reads configuration, sets up logging, creates the Qt application and shows
the clock window.
"""

import sys

from PyQt6.QtWidgets import QApplication

from pomodoro_clock.core.config import load_config
from pomodoro_clock.core.logger import configure_logging, log
from pomodoro_clock.ui.main_window import MainWindow
from pomodoro_clock.ui.styles import apply_theme


def main() -> int:
    config = load_config()
    configure_logging(level=config.log_level, log_dir=config.log_dir)
    log.info(f"Starting pomodoro clock (audio={'on' if config.audio_enabled else 'off'}, auto_cycle={config.auto_cycle})")

    app = QApplication(sys.argv)
    apply_theme(app)

    window = MainWindow(config)
    window.show()
    return app.exec()


def run() -> None:
    try:
        raise SystemExit(main())
    except SystemExit:
        raise
    except Exception:
        log.exception("Uncaught exception in entrypoint, exiting")
        sys.exit(1)


if __name__ == "__main__":
    run()
