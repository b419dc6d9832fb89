from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from pomodoro_clock.core.logger import log
from pomodoro_clock.core.ticker import Ticker


ROUNDING_BIAS_MS = 200


class Phase(str, Enum):
    WORK = "work"
    REST = "rest"

    @property
    def label(self) -> str:
        return "FOCUS" if self is Phase.WORK else "REST"

    @property
    def opposite(self) -> Phase:
        return Phase.REST if self is Phase.WORK else Phase.WORK


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ELAPSED = "elapsed"


class Display(Protocol):
    def show_phase(self, label: str) -> None: ...

    def show_time(self, minutes: str, seconds: str) -> None: ...

    def show_delimiter(self, dimmed: bool) -> None: ...


class AlarmLike(Protocol):
    def ring(self) -> object: ...


@dataclass(frozen=True)
class TimerSnapshot:
    status: TimerStatus
    phase: Phase
    work_interval: float
    rest_interval: float
    remaining_seconds: float
    delimiter_dimmed: bool


def format_remaining(seconds: float) -> tuple[str, str]:
    """Split remaining seconds into the clock's minutes and seconds fields."""
    total_ms = max(0, int(seconds * 1000)) + ROUNDING_BIAS_MS
    minutes, rest_ms = divmod(total_ms, 60_000)
    return f"{minutes:2d}", f"{rest_ms // 1000:02d}"


TickerFactory = Callable[[Callable[[Ticker], None], float], Ticker]


class PomodoroTimer:
    """Work/rest countdown driven by a background ticker.

    Every read or write of the phase, intervals, deadline and ticker happens
    under ``_lock``. Display calls are made while holding it.
    """

    def __init__(
        self,
        display: Display,
        alarm: AlarmLike | None = None,
        *,
        work_seconds: float = 60 * 60,
        rest_seconds: float = 15 * 60,
        auto_cycle: bool = False,
        tick_interval: float = 1.0,
        ticker_factory: TickerFactory | None = None,
        now: float | None = None,
    ) -> None:
        if rest_seconds <= 0:
            raise ValueError("Durations must be positive")
        self._display = display
        self._alarm = alarm
        self._auto_cycle = auto_cycle
        self._tick_interval = tick_interval
        self._ticker_factory = ticker_factory or Ticker
        self._lock = threading.Lock()

        self._phase = Phase.WORK
        self._status = TimerStatus.IDLE
        self._work_interval = 0.0
        self._rest_interval = float(rest_seconds)
        self._deadline = 0.0
        self._ticker: Ticker | None = None
        self._delimiter_dimmed = False

        self.select_interval(work_seconds, now=now)

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def auto_cycle(self) -> bool:
        return self._auto_cycle

    @property
    def work_interval(self) -> float:
        return self._work_interval

    @property
    def rest_interval(self) -> float:
        return self._rest_interval

    @property
    def deadline(self) -> float:
        return self._deadline

    @property
    def ticker(self) -> Ticker | None:
        return self._ticker

    def select_interval(self, seconds: float, now: float | None = None) -> None:
        if seconds <= 0:
            raise ValueError("Durations must be positive")
        if now is None:
            now = time.monotonic()
        with self._lock:
            if self._phase is Phase.WORK:
                self._work_interval = float(seconds)
            else:
                self._rest_interval = float(seconds)
            self._deadline = now + seconds
            self._show_remaining(seconds)
        log.debug(f"Selected {seconds:.0f}s interval for {self._phase.value} phase")

    def start(self, phase: Phase, now: float | None = None) -> None:
        if now is None:
            now = time.monotonic()
        with self._lock:
            previous = self._begin_phase(phase, now)
            ticker = self._ticker
        self._retire(previous)
        if ticker is not None:
            ticker.start()
        log.info(f"Started {phase.value} phase")

    def stop(self) -> None:
        with self._lock:
            previous = self._ticker
            self._ticker = None
            if previous is not None:
                previous.cancel()
            self._status = TimerStatus.IDLE
            self._display.show_phase("")
            self._delimiter_dimmed = False
            self._display.show_delimiter(False)
        self._retire(previous)
        log.info("Stopped timer")

    def tick(self, now: float | None = None, *, ticker: Ticker | None = None) -> None:
        if now is None:
            now = time.monotonic()
        with self._lock:
            if ticker is not None and ticker is not self._ticker:
                return
            if self._status != TimerStatus.RUNNING:
                return
            try:
                self._advance(now)
            except Exception:
                self._abandon_ticker()
                raise

    def _advance(self, now: float) -> None:
        self._delimiter_dimmed = not self._delimiter_dimmed
        self._display.show_delimiter(self._delimiter_dimmed)

        remaining = self._deadline - now
        if remaining <= 0:
            self._end_phase(now)
            return
        self._show_remaining(remaining)

    def _abandon_ticker(self) -> None:
        # The failing ticker exits after this tick; the timer must not claim to run.
        ticker = self._ticker
        self._ticker = None
        if ticker is not None:
            ticker.cancel()
        self._status = TimerStatus.IDLE
        log.warning("Tick failed, timer is now idle")

    def snapshot(self, now: float | None = None) -> TimerSnapshot:
        if now is None:
            now = time.monotonic()
        with self._lock:
            if self._status == TimerStatus.RUNNING:
                remaining = max(0.0, self._deadline - now)
            else:
                remaining = self._interval_for(self._phase)
            return TimerSnapshot(
                status=self._status,
                phase=self._phase,
                work_interval=self._work_interval,
                rest_interval=self._rest_interval,
                remaining_seconds=remaining,
                delimiter_dimmed=self._delimiter_dimmed,
            )

    def _interval_for(self, phase: Phase) -> float:
        return self._work_interval if phase is Phase.WORK else self._rest_interval

    def _show_remaining(self, seconds: float) -> None:
        minutes, secs = format_remaining(seconds)
        self._display.show_time(minutes, secs)

    def _show_phase(self, phase: Phase, now: float) -> None:
        self._phase = phase
        self._display.show_phase(phase.label)
        interval = self._interval_for(phase)
        self._show_remaining(interval)
        self._deadline = now + interval

    def _begin_phase(self, phase: Phase, now: float) -> Ticker | None:
        previous = self._ticker
        if previous is not None:
            previous.cancel()
        self._show_phase(phase, now)
        self._ticker = self._ticker_factory(self._on_tick, self._tick_interval)
        self._status = TimerStatus.RUNNING
        return previous

    def _end_phase(self, now: float) -> None:
        finished = self._phase
        previous = self._ticker
        self._ticker = None
        if previous is not None:
            previous.cancel()
        log.info(f"{finished.value.capitalize()} phase finished")

        if self._alarm is not None:
            self._alarm.ring()

        if self._auto_cycle:
            self._begin_phase(finished.opposite, now)
            if self._ticker is not None:
                self._ticker.start()
            return
        self._show_phase(finished.opposite, now)
        self._status = TimerStatus.ELAPSED

    def _on_tick(self, ticker: Ticker) -> None:
        self.tick(ticker=ticker)

    def _retire(self, ticker: Ticker | None) -> None:
        if ticker is not None:
            ticker.join()
