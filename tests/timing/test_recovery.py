"""RecoveryTimer — countdown, single warning, skip and cancel."""

from __future__ import annotations

import pytest

from pace_coach.timing.recovery import RecoveryTimer, RecoveryType


class _Recorder:
    def __init__(self) -> None:
        self.completions: list[bool] = []
        self.warnings: list[float] = []

    def on_complete(self, timer: RecoveryTimer, skipped: bool) -> None:
        self.completions.append(skipped)

    def on_warning(self, timer: RecoveryTimer) -> None:
        self.warnings.append(timer.remaining_s)


def _timer(duration: float, **kwargs) -> tuple[RecoveryTimer, _Recorder]:
    rec = _Recorder()
    timer = RecoveryTimer(
        duration,
        kwargs.pop("recovery_type", RecoveryType.REP),
        on_complete=rec.on_complete,
        on_warning=rec.on_warning,
        **kwargs,
    )
    return timer, rec


def test_countdown_warns_once_at_fifteen_seconds():
    timer, rec = _timer(30)
    timer.start()
    for _ in range(14):
        timer.tick()
    assert timer.remaining_s == 16
    assert rec.warnings == []

    timer.tick()
    assert rec.warnings == [15]
    assert timer.in_warning is True

    for _ in range(5):
        timer.tick()
    assert rec.warnings == [15]


def test_countdown_completes_at_zero():
    timer, rec = _timer(20)
    timer.start()
    for _ in range(20):
        timer.tick()
    assert timer.remaining_s == 0
    assert timer.finished is True
    assert rec.completions == [False]


def test_ticks_after_completion_are_ignored():
    timer, rec = _timer(2)
    timer.start()
    for _ in range(5):
        timer.tick()
    assert rec.completions == [False]


def test_short_recovery_warns_immediately():
    timer, rec = _timer(10)
    timer.start()
    assert rec.warnings == [10]
    for _ in range(10):
        timer.tick()
    assert len(rec.warnings) == 1
    assert rec.completions == [False]


def test_zero_recovery_completes_on_start():
    timer, rec = _timer(0)
    timer.start()
    assert timer.finished is True
    assert rec.completions == [False]
    assert rec.warnings == []


def test_tick_before_start_is_ignored():
    timer, _ = _timer(30)
    timer.tick()
    assert timer.remaining_s == 30


def test_skip_signals_completion_once():
    timer, rec = _timer(60, recovery_type=RecoveryType.SERIES)
    timer.start()
    for _ in range(3):
        timer.tick()
    timer.skip()
    timer.skip()
    assert rec.completions == [True]
    assert timer.skipped is True
    assert timer.remaining_s == 57


def test_cancel_tears_down_silently():
    timer, rec = _timer(60)
    timer.start()
    timer.cancel()
    timer.tick()
    assert timer.cancelled is True
    assert timer.finished is True
    assert timer.remaining_s == 60
    assert rec.completions == []


def test_progress_percent():
    timer, _ = _timer(60)
    timer.start()
    for _ in range(15):
        timer.tick()
    assert timer.progress_percent == pytest.approx(25.0)


def test_custom_tick_length():
    timer, rec = _timer(1.0, tick_s=0.25)
    timer.start()
    for _ in range(4):
        timer.tick()
    assert rec.completions == [False]
