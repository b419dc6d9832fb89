import pytest

from pomodoro_clock.core.timer import Phase, PomodoroTimer, TimerStatus, format_remaining


class FakeDisplay:
    def __init__(self) -> None:
        self.phases: list[str] = []
        self.times: list[tuple[str, str]] = []
        self.delimiters: list[bool] = []

    def show_phase(self, label: str) -> None:
        self.phases.append(label)

    def show_time(self, minutes: str, seconds: str) -> None:
        self.times.append((minutes, seconds))

    def show_delimiter(self, dimmed: bool) -> None:
        self.delimiters.append(dimmed)


class FakeTicker:
    def __init__(self, callback, interval: float) -> None:
        self.callback = callback
        self.interval = interval
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def join(self, timeout=None) -> None:
        pass


class FakeAlarm:
    def __init__(self) -> None:
        self.rings = 0

    def ring(self) -> None:
        self.rings += 1


def make_timer(auto_cycle: bool = False, **kwargs):
    display = FakeDisplay()
    alarm = FakeAlarm()
    timer = PomodoroTimer(display, alarm, auto_cycle=auto_cycle, ticker_factory=FakeTicker, now=0.0, **kwargs)
    return timer, display, alarm


def test_startup_defaults() -> None:
    timer, display, _alarm = make_timer()

    assert timer.status == TimerStatus.IDLE
    assert timer.phase == Phase.WORK
    assert timer.work_interval == 60 * 60
    assert timer.rest_interval == 15 * 60
    assert timer.ticker is None
    assert display.times == [("60", "00")]
    assert display.phases == []


def test_select_interval_in_work_only_changes_work_interval() -> None:
    timer, display, _alarm = make_timer()

    timer.select_interval(25 * 60, now=0.0)

    assert timer.work_interval == 25 * 60
    assert timer.rest_interval == 15 * 60
    assert display.times[-1] == ("25", "00")


def test_select_interval_in_rest_only_changes_rest_interval() -> None:
    timer, _display, _alarm = make_timer()
    timer.start(Phase.REST, now=0.0)
    timer.stop()

    timer.select_interval(5 * 60, now=10.0)

    assert timer.rest_interval == 5 * 60
    assert timer.work_interval == 60 * 60


def test_select_interval_rejects_non_positive() -> None:
    timer, _display, _alarm = make_timer()

    with pytest.raises(ValueError):
        timer.select_interval(0)


def test_start_work_then_immediate_tick_shows_full_interval() -> None:
    timer, display, _alarm = make_timer()

    timer.start(Phase.WORK, now=100.0)
    timer.tick(now=100.0)

    assert timer.status == TimerStatus.RUNNING
    assert display.phases[-1] == "FOCUS"
    assert display.times[-1] == ("60", "00")
    assert timer.ticker is not None and timer.ticker.started


def test_start_rest_from_startup_state() -> None:
    timer, display, _alarm = make_timer()

    timer.start(Phase.REST, now=0.0)

    assert display.phases[-1] == "REST"
    assert display.times[-1] == ("15", "00")
    assert timer.deadline == 15 * 60
    assert timer.ticker is not None and timer.ticker.started


def test_tick_counts_down_and_blinks_delimiter() -> None:
    timer, display, _alarm = make_timer()
    timer.start(Phase.WORK, now=0.0)

    timer.tick(now=1.0)
    timer.tick(now=2.0)
    timer.tick(now=60.0)

    assert display.delimiters == [True, False, True]
    assert display.times[-1] == ("59", "00")


def test_interval_change_applies_live_while_running() -> None:
    timer, display, _alarm = make_timer()
    timer.start(Phase.WORK, now=0.0)
    timer.tick(now=30.0)

    timer.select_interval(5 * 60, now=30.0)
    timer.tick(now=31.0)

    assert timer.deadline == 330.0
    assert display.times[-1] == (" 4", "59")


def test_deadline_crossing_flips_phase_and_waits_without_auto_cycle() -> None:
    timer, display, alarm = make_timer(auto_cycle=False)
    timer.select_interval(10, now=0.0)
    timer.start(Phase.WORK, now=0.0)
    first = timer.ticker

    timer.tick(now=10.0)

    assert first.cancelled
    assert timer.ticker is None
    assert timer.status == TimerStatus.ELAPSED
    assert timer.phase == Phase.REST
    assert timer.deadline == 10.0 + 15 * 60
    assert display.phases[-1] == "REST"
    assert display.times[-1] == ("15", "00")
    assert alarm.rings == 1

    timer.tick(now=5000.0)
    assert alarm.rings == 1
    assert timer.phase == Phase.REST


def test_deadline_crossing_rearms_ticking_with_auto_cycle() -> None:
    timer, display, alarm = make_timer(auto_cycle=True)
    timer.start(Phase.REST, now=0.0)
    first = timer.ticker

    timer.tick(now=15 * 60 + 0.5)

    assert first.cancelled
    assert timer.ticker is not first
    assert timer.ticker.started
    assert timer.status == TimerStatus.RUNNING
    assert timer.phase == Phase.WORK
    assert display.phases[-1] == "FOCUS"
    assert alarm.rings == 1


def test_phase_end_does_not_display_remaining_time() -> None:
    timer, display, _alarm = make_timer()
    timer.select_interval(10, now=0.0)
    timer.start(Phase.WORK, now=0.0)
    before = len(display.times)

    timer.tick(now=11.0)

    # only the full interval of the next phase is shown
    assert display.times[before:] == [("15", "00")]


def test_stop_clears_label_and_ignores_later_ticks() -> None:
    timer, display, _alarm = make_timer()
    timer.start(Phase.WORK, now=0.0)
    ticker = timer.ticker
    timer.tick(now=1.0)

    timer.stop()
    updates = (len(display.times), len(display.delimiters))
    timer.tick(now=2.0, ticker=ticker)

    assert ticker.cancelled
    assert timer.ticker is None
    assert timer.status == TimerStatus.IDLE
    assert display.phases[-1] == ""
    assert display.delimiters[-1] is False
    assert (len(display.times), len(display.delimiters)) == updates
    assert timer.work_interval == 60 * 60


def test_second_start_cancels_first_ticker() -> None:
    timer, display, _alarm = make_timer()

    timer.start(Phase.WORK, now=0.0)
    first = timer.ticker
    timer.start(Phase.WORK, now=0.1)
    second = timer.ticker

    assert first is not second
    assert first.cancelled
    assert not second.cancelled
    updates = len(display.times)
    timer.tick(now=1.0, ticker=first)
    assert len(display.times) == updates


def test_display_failure_mid_run_leaves_timer_idle() -> None:
    class BrokenDisplay(FakeDisplay):
        fail = False

        def show_time(self, minutes: str, seconds: str) -> None:
            if self.fail:
                raise RuntimeError("display went away")
            super().show_time(minutes, seconds)

    display = BrokenDisplay()
    timer = PomodoroTimer(display, ticker_factory=FakeTicker, now=0.0)
    timer.start(Phase.WORK, now=0.0)
    ticker = timer.ticker

    display.fail = True
    with pytest.raises(RuntimeError):
        timer.tick(now=1.0, ticker=ticker)

    assert timer.status == TimerStatus.IDLE
    assert timer.ticker is None
    assert ticker.cancelled


def test_snapshot_reports_remaining() -> None:
    timer, _display, _alarm = make_timer()
    timer.start(Phase.WORK, now=0.0)

    snapshot = timer.snapshot(now=600.0)

    assert snapshot.status == TimerStatus.RUNNING
    assert snapshot.phase == Phase.WORK
    assert snapshot.remaining_seconds == 3000.0


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (59.9, (" 1", "00")),
        (0.0, (" 0", "00")),
        (0.05, (" 0", "00")),
        (0.7996, (" 0", "00")),
        (-3.0, (" 0", "00")),
        (60 * 60, ("60", "00")),
        (299.0, (" 4", "59")),
        (105 * 60, ("105", "00")),
    ],
)
def test_format_remaining(seconds, expected) -> None:
    assert format_remaining(seconds) == expected
