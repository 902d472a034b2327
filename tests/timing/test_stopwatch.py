"""StopwatchEngine — transitions, pause accounting and auto-stop."""

from __future__ import annotations

import pytest

from pace_coach.timing.stopwatch import StopwatchEngine, StopwatchState


class _Clock:
    """Manually advanced monotonic clock."""

    def __init__(self, t: float = 100.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


def _stopwatch(total: float | None = 600.0) -> tuple[StopwatchEngine, _Clock]:
    clock = _Clock()
    return StopwatchEngine(total, _time_fn=clock), clock


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def test_new_stopwatch_is_idle():
    sw, _ = _stopwatch()
    assert sw.state is StopwatchState.IDLE
    assert sw.elapsed_s == 0.0
    assert sw.is_running is False


def test_start_sets_running_from_zero():
    sw, _ = _stopwatch()
    assert sw.start() is True
    assert sw.state is StopwatchState.RUNNING
    assert sw.elapsed_s == 0.0


def test_start_ignored_while_running():
    sw, clock = _stopwatch()
    sw.start()
    clock.advance(3.0)
    assert sw.start() is False
    assert sw.tick() == pytest.approx(3.0)


def test_pause_and_resume_ignored_from_wrong_state():
    sw, _ = _stopwatch()
    assert sw.pause() is False
    assert sw.resume() is False
    sw.start()
    assert sw.resume() is False


def test_reset_twice_is_idle_at_zero():
    sw, clock = _stopwatch()
    sw.start()
    clock.advance(4.0)
    sw.tick()
    sw.reset()
    sw.reset()
    assert sw.state is StopwatchState.IDLE
    assert sw.elapsed_s == 0.0


# ---------------------------------------------------------------------------
# Elapsed computation
# ---------------------------------------------------------------------------


def test_pause_resume_round_trip_excludes_paused_time():
    """5 s running, 3 s paused, 2 s running → 7 s elapsed."""
    sw, clock = _stopwatch()
    sw.start()
    clock.advance(5.0)
    assert sw.pause() is True
    clock.advance(3.0)
    assert sw.tick() == pytest.approx(5.0)  # frozen while paused
    assert sw.resume() is True
    clock.advance(2.0)
    assert sw.tick() == pytest.approx(7.0)


def test_elapsed_recomputed_from_clock_not_tick_count():
    sw, clock = _stopwatch()
    sw.start()
    clock.advance(3.37)  # no ticks in between
    assert sw.tick() == pytest.approx(3.37)


def test_snapshot_paused_implies_running():
    sw, clock = _stopwatch()
    sw.start()
    clock.advance(1.0)
    sw.pause()
    state = sw.snapshot()
    assert state.is_paused is True
    assert state.is_running is True
    assert state.elapsed_s == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# Remaining time and auto-stop
# ---------------------------------------------------------------------------


def test_remaining_counts_down():
    sw, clock = _stopwatch(total=60.0)
    sw.start()
    clock.advance(15.0)
    sw.tick()
    assert sw.remaining_s == pytest.approx(45.0)


def test_auto_stop_at_total_duration():
    sw, clock = _stopwatch(total=10.0)
    sw.start()
    clock.advance(12.0)
    assert sw.tick() == pytest.approx(10.0)
    assert sw.state is StopwatchState.STOPPED
    assert sw.finished is True
    assert sw.is_running is False
    assert sw.remaining_s == 0.0


def test_late_tick_does_not_revive_stopped_engine():
    sw, clock = _stopwatch(total=10.0)
    sw.start()
    clock.advance(12.0)
    sw.tick()
    clock.advance(5.0)
    assert sw.tick() == pytest.approx(10.0)
    assert sw.state is StopwatchState.STOPPED


def test_restart_after_auto_stop():
    sw, clock = _stopwatch(total=10.0)
    sw.start()
    clock.advance(11.0)
    sw.tick()
    assert sw.start() is True
    assert sw.elapsed_s == 0.0
    assert sw.state is StopwatchState.RUNNING


def test_pause_past_the_end_stops_instead():
    sw, clock = _stopwatch(total=5.0)
    sw.start()
    clock.advance(6.0)
    assert sw.pause() is False
    assert sw.state is StopwatchState.STOPPED


def test_open_ended_stopwatch_never_auto_stops():
    sw, clock = _stopwatch(total=None)
    sw.start()
    clock.advance(10_000.0)
    sw.tick()
    assert sw.state is StopwatchState.RUNNING
    assert sw.remaining_s == 0.0


def test_zero_duration_is_open_ended():
    sw, clock = _stopwatch(total=0.0)
    assert sw.total_duration_s is None
    sw.start()
    clock.advance(1.0)
    sw.tick()
    assert sw.state is StopwatchState.RUNNING
