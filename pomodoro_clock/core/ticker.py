from __future__ import annotations

import threading
import time
from typing import Callable

from pomodoro_clock.core.logger import log


def next_beat(started: float, interval: float, beat: int, now: float) -> tuple[int, float]:
    """Return the next beat number at or after ``now`` and the delay until it.

    Beats sit at ``started + beat * interval``; beats already in the past are
    dropped rather than fired back to back.
    """
    target = started + beat * interval
    if target < now:
        beat += int((now - target) // interval) + 1
        target = started + beat * interval
    return beat, target - now


class Ticker:
    """Calls ``callback(self)`` right away and then at a fixed rate of one per ``interval``.

    Cancellation is cooperative: ``cancel()`` wakes the wait between ticks and
    the loop exits without starting another one.
    """

    def __init__(
        self,
        callback: Callable[[Ticker], None],
        interval: float = 1.0,
        name: str = "pomodoro-ticker",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        # A ticker may retire itself from inside its own callback.
        if self._thread is threading.current_thread() or not self._thread.is_alive():
            return
        self._thread.join(timeout)

    def _run(self) -> None:
        if self._cancelled.is_set():
            return
        started = self._clock()
        beat = 0
        try:
            self._callback(self)
            while True:
                beat, delay = next_beat(started, self._interval, beat + 1, self._clock())
                if self._cancelled.wait(delay):
                    return
                self._callback(self)
        except Exception:
            log.exception(f"Tick callback failed in '{self._thread.name}', stopping ticker")
            self._cancelled.set()
