from __future__ import annotations

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStyle,
    QVBoxLayout,
    QWidget,
)

from pomodoro_clock.audio.alarm import Alarm
from pomodoro_clock.core.config import INTERVAL_PRESETS_MINUTES, AppConfig
from pomodoro_clock.core.timer import Phase, PomodoroTimer
from pomodoro_clock.ui.styles import delimiter_qss


class ClockDisplay(QObject):
    """Display surface for the timer.

    Ticks arrive on the ticker thread, so every update is re-emitted as a
    signal and applied to the widgets on the GUI thread.
    """

    phase_changed = pyqtSignal(str)
    time_changed = pyqtSignal(str, str)
    delimiter_changed = pyqtSignal(bool)

    def show_phase(self, label: str) -> None:
        self.phase_changed.emit(label)

    def show_time(self, minutes: str, seconds: str) -> None:
        self.time_changed.emit(minutes, seconds)

    def show_delimiter(self, dimmed: bool) -> None:
        self.delimiter_changed.emit(dimmed)


class MainWindow(QMainWindow):
    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro (DX)")

        self.config = config
        self.display = ClockDisplay(self)

        self._build_ui()
        self._connect_signals()

        self.timer = PomodoroTimer(
            self.display,
            Alarm(enabled=config.audio_enabled),
            work_seconds=config.work_seconds,
            rest_seconds=config.rest_seconds,
            auto_cycle=config.auto_cycle,
            tick_interval=config.tick_interval,
        )

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)

        self.phase_label = QLabel("")
        self.phase_label.setObjectName("PhaseLabel")
        self.phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root_layout.addWidget(self.phase_label)

        clock = QHBoxLayout()
        self.minutes_label = QLabel("")
        self.minutes_label.setObjectName("DigitLabel")
        self.delimiter_label = QLabel(":")
        self.delimiter_label.setObjectName("DelimiterLabel")
        self.delimiter_label.setStyleSheet(delimiter_qss(False))
        self.seconds_label = QLabel("")
        self.seconds_label.setObjectName("DigitLabel")
        clock.addStretch()
        clock.addWidget(self.minutes_label)
        clock.addWidget(self.delimiter_label)
        clock.addWidget(self.seconds_label)
        clock.addStretch()
        root_layout.addLayout(clock)

        play_icon = self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPlay)
        stop_icon = self.style().standardIcon(QStyle.StandardPixmap.SP_MediaStop)

        self.interval_buttons: dict[int, QPushButton] = {}
        for minutes in INTERVAL_PRESETS_MINUTES:
            self.interval_buttons[minutes] = QPushButton(f"{minutes:>3}")
        self.work_btn = QPushButton(play_icon, "WORK")
        self.work_btn.setObjectName("PhaseButton")
        self.rest_btn = QPushButton(play_icon, "REST")
        self.rest_btn.setObjectName("PhaseButton")
        self.stop_btn = QPushButton(stop_icon, "STOP")

        half = len(INTERVAL_PRESETS_MINUTES) // 2
        first_row = QHBoxLayout()
        for minutes in INTERVAL_PRESETS_MINUTES[:half]:
            first_row.addWidget(self.interval_buttons[minutes])
        first_row.addWidget(self.work_btn)
        first_row.addStretch()
        second_row = QHBoxLayout()
        for minutes in INTERVAL_PRESETS_MINUTES[half:]:
            second_row.addWidget(self.interval_buttons[minutes])
        second_row.addWidget(self.rest_btn)
        second_row.addWidget(self.stop_btn)
        second_row.addStretch()
        root_layout.addLayout(first_row)
        root_layout.addLayout(second_row)

    def _connect_signals(self) -> None:
        self.display.phase_changed.connect(self.phase_label.setText)
        self.display.time_changed.connect(self._set_time)
        self.display.delimiter_changed.connect(self._set_delimiter)

        for minutes, button in self.interval_buttons.items():
            button.clicked.connect(lambda _checked=False, m=minutes: self.select_interval(m))
        self.work_btn.clicked.connect(lambda: self.timer.start(Phase.WORK))
        self.rest_btn.clicked.connect(lambda: self.timer.start(Phase.REST))
        self.stop_btn.clicked.connect(lambda: self.timer.stop())

    def select_interval(self, minutes: int) -> None:
        self.timer.select_interval(minutes * 60)

    def _set_time(self, minutes: str, seconds: str) -> None:
        self.minutes_label.setText(minutes)
        self.seconds_label.setText(seconds)

    def _set_delimiter(self, dimmed: bool) -> None:
        self.delimiter_label.setStyleSheet(delimiter_qss(dimmed))

    def closeEvent(self, event) -> None:  # noqa: N802
        self.timer.stop()
        event.accept()
