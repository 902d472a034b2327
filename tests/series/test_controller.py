"""SeriesController — progression through series × repetitions with recovery."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pace_coach.pace.models import Assessment, RunConfig, Tier
from pace_coach.series.controller import SeriesController
from pace_coach.series.models import InvalidConfig, SeriesProgress, SeriesState
from pace_coach.timing.recovery import RecoveryType
from pace_coach.timing.stopwatch import StopwatchState
from pace_coach.tracking.run import Run


class _Clock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


def _assessment(speed: float = 9.6, tier: Tier = Tier.EXCELLENT) -> Assessment:
    return Assessment(
        actual_distance_m=speed / 3.6 * 180,
        actual_speed_kmh=speed,
        actual_vma_percent=speed / 12.0 * 100,
        deviation_tier=tier,
    )


def _controller(**callbacks):
    clock = _Clock()
    runs: list[Run] = []

    def factory() -> Run:
        run = Run(RunConfig(), _time_fn=clock)
        runs.append(run)
        return run

    return SeriesController(factory, **callbacks), runs, clock


# ---------------------------------------------------------------------------
# create / cancel
# ---------------------------------------------------------------------------


def test_new_controller_is_inactive():
    ctrl, _, _ = _controller()
    assert ctrl.state is SeriesState.INACTIVE
    assert ctrl.progress is None
    assert ctrl.is_complete() is False


def test_create_series_starts_at_first_rep():
    ctrl, runs, _ = _controller()
    progress = ctrl.create_series(2, 2, 30, 90)
    assert progress == SeriesProgress(1, 1)
    assert ctrl.state is SeriesState.ACTIVE
    assert ctrl.active_run is runs[0]


@pytest.mark.parametrize("series, reps", [(0, 2), (2, 0), (-1, -1)])
def test_create_series_rejects_counts_below_one(series, reps):
    ctrl, _, _ = _controller()
    with pytest.raises(InvalidConfig):
        ctrl.create_series(series, reps)
    assert ctrl.state is SeriesState.INACTIVE


def test_invalid_create_leaves_existing_series_intact():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2, 30, 90)
    ctrl.validate_performance(_assessment())
    with pytest.raises(InvalidConfig):
        ctrl.create_series(0, 1)
    assert ctrl.state is SeriesState.RECOVERY
    assert len(ctrl.performance_history) == 1


def test_cancel_during_recovery_discards_everything():
    finished = MagicMock()
    ctrl, _, _ = _controller(on_recovery_finished=finished)
    ctrl.create_series(2, 2, 30, 90)
    ctrl.validate_performance(_assessment())
    timer = ctrl.recovery
    ctrl.cancel_series()
    assert timer.cancelled is True
    assert ctrl.state is SeriesState.INACTIVE
    assert ctrl.progress is None
    assert ctrl.active_run is None
    assert ctrl.performance_history == []
    finished.assert_not_called()


# ---------------------------------------------------------------------------
# Full progression
# ---------------------------------------------------------------------------


def test_two_by_two_series_progression():
    complete = MagicMock()
    ctrl, runs, _ = _controller(on_series_complete=complete)
    ctrl.create_series(2, 2, 30, 90)

    outcome = ctrl.validate_performance(_assessment())
    assert outcome.completed is False
    assert outcome.recovery_type is RecoveryType.REP
    assert outcome.recovery_s == 30
    assert outcome.next_progress == SeriesProgress(1, 2)
    assert ctrl.state is SeriesState.RECOVERY
    assert ctrl.progress == SeriesProgress(1, 1)
    assert ctrl.staged_progress == SeriesProgress(1, 2)
    assert ctrl.recovery.remaining_s == 30

    assert ctrl.on_recovery_complete() is True
    assert ctrl.progress == SeriesProgress(1, 2)
    assert ctrl.state is SeriesState.ACTIVE
    assert ctrl.active_run is runs[1]

    outcome = ctrl.validate_performance(_assessment())
    assert outcome.recovery_type is RecoveryType.SERIES
    assert outcome.recovery_s == 90
    ctrl.on_recovery_complete()
    assert ctrl.progress == SeriesProgress(2, 1)

    outcome = ctrl.validate_performance(_assessment())
    assert outcome.recovery_type is RecoveryType.REP
    ctrl.on_recovery_complete()
    assert ctrl.progress == SeriesProgress(2, 2)
    assert ctrl.is_complete() is True
    assert ctrl.state is SeriesState.ACTIVE

    outcome = ctrl.validate_performance(_assessment())
    assert outcome.completed is True
    assert outcome.recovery_type is None
    assert ctrl.state is SeriesState.COMPLETE
    assert ctrl.recovery is None
    assert ctrl.progress == SeriesProgress(2, 2)
    assert [(r.series, r.rep) for r in ctrl.performance_history] == [
        (1, 1), (1, 2), (2, 1), (2, 2)
    ]
    complete.assert_called_once_with(ctrl)


def test_single_run_series_completes_immediately():
    ctrl, _, _ = _controller()
    ctrl.create_series(1, 1)
    outcome = ctrl.validate_performance(_assessment())
    assert outcome.completed is True
    assert ctrl.state is SeriesState.COMPLETE


# ---------------------------------------------------------------------------
# Validation guards
# ---------------------------------------------------------------------------


def test_validate_without_assessment_changes_nothing():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2, 30, 90)
    assert ctrl.validate_performance(None) is None
    assert ctrl.performance_history == []
    assert ctrl.state is SeriesState.ACTIVE


def test_validate_when_inactive_is_ignored():
    ctrl, _, _ = _controller()
    assert ctrl.validate_performance(_assessment()) is None


def test_validate_during_recovery_is_ignored():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2, 30, 90)
    ctrl.validate_performance(_assessment())
    assert ctrl.validate_performance(_assessment()) is None
    assert len(ctrl.performance_history) == 1


def test_validate_resets_finished_run():
    ctrl, _, clock = _controller()
    ctrl.create_series(1, 2, 30, 0)
    run = ctrl.active_run
    run.start()
    clock.advance(75.0)
    run.mark()
    ctrl.validate_performance(_assessment())
    assert run.stopwatch.state is StopwatchState.IDLE
    assert run.laps.history == []


def test_record_copies_assessment_fields():
    ctrl, _, _ = _controller()
    ctrl.create_series(1, 2, 30, 0)
    outcome = ctrl.validate_performance(_assessment(10.5, Tier.FAIR))
    record = outcome.record
    assert (record.series, record.rep) == (1, 1)
    assert record.actual_speed_kmh == pytest.approx(10.5)
    assert record.deviation_tier is Tier.FAIR
    assert record.to_dict()["deviation_tier"] == "fair"


# ---------------------------------------------------------------------------
# Recovery countdown
# ---------------------------------------------------------------------------


def test_countdown_reaching_zero_commits_progress():
    started = MagicMock()
    finished = MagicMock()
    ctrl, _, _ = _controller(on_recovery_started=started, on_recovery_finished=finished)
    ctrl.create_series(1, 2, 3, 0)
    ctrl.validate_performance(_assessment())
    timer = ctrl.recovery
    started.assert_called_once_with(timer)
    for _ in range(3):
        timer.tick()
    assert ctrl.progress == SeriesProgress(1, 2)
    assert ctrl.state is SeriesState.ACTIVE
    finished.assert_called_once_with(timer, False)


def test_skip_recovery_commits_progress():
    finished = MagicMock()
    ctrl, _, _ = _controller(on_recovery_finished=finished)
    ctrl.create_series(2, 1, 0, 90)
    ctrl.validate_performance(_assessment())
    timer = ctrl.recovery
    assert ctrl.skip_recovery() is True
    assert ctrl.progress == SeriesProgress(2, 1)
    finished.assert_called_once_with(timer, True)


def test_skip_without_recovery_is_refused():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2, 30, 90)
    assert ctrl.skip_recovery() is False


def test_zero_recovery_commits_at_once():
    started = MagicMock()
    ctrl, _, _ = _controller(on_recovery_started=started)
    ctrl.create_series(1, 2, 0, 0)
    outcome = ctrl.validate_performance(_assessment())
    assert outcome.next_progress == SeriesProgress(1, 2)
    assert ctrl.state is SeriesState.ACTIVE
    assert ctrl.progress == SeriesProgress(1, 2)
    started.assert_not_called()


def test_recovery_warning_forwarded_once():
    warning = MagicMock()
    ctrl, _, _ = _controller(on_recovery_warning=warning)
    ctrl.create_series(1, 2, 20, 0)
    ctrl.validate_performance(_assessment())
    for _ in range(10):
        ctrl.recovery.tick()
    warning.assert_called_once()


def test_manual_complete_outside_recovery_refused():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2, 30, 90)
    assert ctrl.on_recovery_complete() is False
    assert ctrl.on_recovery_skip() is False


# ---------------------------------------------------------------------------
# Runs and stats
# ---------------------------------------------------------------------------


def test_renew_run_replaces_idle_run():
    ctrl, runs, _ = _controller()
    ctrl.create_series(2, 2)
    assert ctrl.renew_run() is True
    assert ctrl.active_run is runs[-1]
    assert len(runs) == 2


def test_renew_run_refused_while_running():
    ctrl, _, _ = _controller()
    ctrl.create_series(2, 2)
    ctrl.active_run.start()
    assert ctrl.renew_run() is False


def test_performance_stats():
    ctrl, _, _ = _controller()
    ctrl.create_series(1, 2, 0, 0)
    ctrl.validate_performance(_assessment(9.0, Tier.FAIR))
    ctrl.validate_performance(_assessment(10.0, Tier.GOOD))
    stats = ctrl.performance_stats()
    assert stats.count == 2
    assert stats.avg_speed_kmh == pytest.approx(9.5)
    assert stats.tier_counts[Tier.GOOD] == 1
