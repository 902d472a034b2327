"""SeriesController — series × repetitions progression with recovery between runs."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pace_coach.pace.models import Assessment
from pace_coach.series.models import (
    PerformanceRecord,
    SeriesConfig,
    SeriesProgress,
    SeriesState,
    ValidationOutcome,
)
from pace_coach.timing.recovery import RecoveryTimer, RecoveryType
from pace_coach.tracking.run import Run
from pace_coach.tracking.stats import SpeedStats, summarize

_logger = logging.getLogger(__name__)


class SeriesController:
    """Drives a training structure of *total_series* × *reps_per_series* runs.

    After each validated run (except the last) the finished run is reset and
    a :class:`~pace_coach.timing.recovery.RecoveryTimer` is started.  The next
    ``(series, rep)`` is staged and only becomes current when the recovery
    completes or is skipped, at which point a fresh :class:`Run` is created.

    Note that :meth:`is_complete` turns True as soon as the last repetition
    becomes current, before it is validated; :attr:`state` reaching
    ``COMPLETE`` is the signal that the final performance was recorded.

    Parameters
    ----------
    run_factory:
        Zero-argument callable returning a new :class:`Run`.
    recovery_tick_s:
        Seconds removed from a recovery countdown per tick.
    on_recovery_started:
        Called with the new timer once a countdown is running; the owner
        attaches a ticker to it.
    on_recovery_finished:
        Called with ``(timer, skipped)`` after the staged progress is
        committed.  This is where run controls are re-enabled.
    on_recovery_warning:
        Called with the timer when the "get ready" warning fires.
    on_series_complete:
        Called with the controller after the final validation.
    """

    def __init__(
        self,
        run_factory: Callable[[], Run],
        recovery_tick_s: float = 1.0,
        on_recovery_started: Callable[[RecoveryTimer], None] | None = None,
        on_recovery_finished: Callable[[RecoveryTimer, bool], None] | None = None,
        on_recovery_warning: Callable[[RecoveryTimer], None] | None = None,
        on_series_complete: Callable[[SeriesController], None] | None = None,
    ) -> None:
        self._run_factory = run_factory
        self._recovery_tick_s = recovery_tick_s
        self._on_recovery_started = on_recovery_started
        self._on_recovery_finished = on_recovery_finished
        self._on_recovery_warning = on_recovery_warning
        self._on_series_complete = on_series_complete

        self._state = SeriesState.INACTIVE
        self._config: SeriesConfig | None = None
        self._progress: SeriesProgress | None = None
        self._staged: SeriesProgress | None = None
        self._history: list[PerformanceRecord] = []
        self._recovery: RecoveryTimer | None = None
        self._run: Run | None = None

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def state(self) -> SeriesState:
        return self._state

    @property
    def config(self) -> SeriesConfig | None:
        return self._config

    @property
    def progress(self) -> SeriesProgress | None:
        return self._progress

    @property
    def staged_progress(self) -> SeriesProgress | None:
        """The ``(series, rep)`` that becomes current when the recovery ends."""
        return self._staged

    @property
    def recovery(self) -> RecoveryTimer | None:
        """The pending recovery countdown, if any."""
        return self._recovery

    @property
    def active_run(self) -> Run | None:
        return self._run

    @property
    def performance_history(self) -> list[PerformanceRecord]:
        return list(self._history)

    def is_complete(self) -> bool:
        """True when the current position is the last repetition of the last series."""
        if self._config is None or self._progress is None:
            return False
        return (
            self._progress.series == self._config.total_series
            and self._progress.rep == self._config.reps_per_series
        )

    def performance_stats(self) -> SpeedStats | None:
        return summarize((r.actual_speed_kmh, r.deviation_tier) for r in self._history)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def create_series(
        self,
        total_series: int,
        reps_per_series: int,
        recovery_between_reps_s: float = 0.0,
        recovery_between_series_s: float = 0.0,
    ) -> SeriesProgress:
        """Start a new series at (1, 1).

        Raises
        ------
        InvalidConfig
            If either count is below 1.  The controller is left unchanged.
        """
        config = SeriesConfig(
            total_series=total_series,
            reps_per_series=reps_per_series,
            recovery_between_reps_s=recovery_between_reps_s,
            recovery_between_series_s=recovery_between_series_s,
        )
        config.validate()

        self._teardown()
        self._config = config
        self._progress = SeriesProgress(1, 1)
        self._history.clear()
        self._run = self._run_factory()
        self._state = SeriesState.ACTIVE
        _logger.info(
            "Series created: %d x %d (recovery %.0fs / %.0fs)",
            total_series,
            reps_per_series,
            recovery_between_reps_s,
            recovery_between_series_s,
        )
        return self._progress

    def cancel_series(self) -> None:
        """Discard the series, its progress and its history."""
        if self._state is SeriesState.INACTIVE:
            return
        self._teardown()
        self._config = None
        self._progress = None
        self._history.clear()
        self._state = SeriesState.INACTIVE
        _logger.info("Series cancelled")

    def validate_performance(self, assessment: Assessment | None) -> ValidationOutcome | None:
        """Record *assessment* for the current run and move on.

        Returns None (and changes nothing) when no series is waiting for a
        validation or when *assessment* is missing.
        """
        if self._state is not SeriesState.ACTIVE:
            _logger.debug("validate_performance() ignored in state %s", self._state.value)
            return None
        if assessment is None:
            _logger.debug("validate_performance() ignored: no assessment")
            return None

        record = PerformanceRecord.from_assessment(self._progress, assessment)
        self._history.append(record)

        current = self._progress
        config = self._config
        if current.rep < config.reps_per_series:
            staged = SeriesProgress(current.series, current.rep + 1)
            recovery_type = RecoveryType.REP
            duration = config.recovery_between_reps_s
        elif current.series < config.total_series:
            staged = SeriesProgress(current.series + 1, 1)
            recovery_type = RecoveryType.SERIES
            duration = config.recovery_between_series_s
        else:
            self._state = SeriesState.COMPLETE
            _logger.info("Series complete: %d performances recorded", len(self._history))
            if self._on_series_complete is not None:
                self._on_series_complete(self)
            return ValidationOutcome(record=record, completed=True)

        if self._run is not None:
            self._run.reset_for_new_run()
        self._staged = staged
        self._state = SeriesState.RECOVERY
        timer = RecoveryTimer(
            duration,
            recovery_type,
            on_complete=self._on_timer_complete,
            on_warning=self._on_recovery_warning,
            tick_s=self._recovery_tick_s,
        )
        self._recovery = timer
        timer.start()
        if not timer.finished and self._on_recovery_started is not None:
            self._on_recovery_started(timer)

        return ValidationOutcome(
            record=record,
            completed=False,
            recovery_type=recovery_type,
            recovery_s=duration,
            next_progress=staged,
        )

    def renew_run(self) -> bool:
        """Replace the idle current run with a fresh one (after a configuration change)."""
        if self._state is not SeriesState.ACTIVE:
            return False
        if self._run is not None and self._run.stopwatch.is_running:
            return False
        self._run = self._run_factory()
        return True

    def skip_recovery(self) -> bool:
        """Cut the pending recovery short.  Returns False if none is pending."""
        if self._state is not SeriesState.RECOVERY or self._recovery is None:
            return False
        self._recovery.skip()
        return True

    def on_recovery_complete(self) -> bool:
        """Commit the staged progress after the countdown reached zero."""
        return self._commit(skipped=False)

    def on_recovery_skip(self) -> bool:
        """Commit the staged progress before the countdown reached zero."""
        return self._commit(skipped=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_timer_complete(self, timer: RecoveryTimer, skipped: bool) -> None:
        if timer is not self._recovery:
            return
        self._commit(skipped)

    def _commit(self, skipped: bool) -> bool:
        if self._state is not SeriesState.RECOVERY:
            return False
        timer = self._recovery
        if timer is not None and not timer.finished:
            timer.cancel()
        self._recovery = None
        self._progress = self._staged
        self._staged = None
        self._run = self._run_factory()
        self._state = SeriesState.ACTIVE
        _logger.info(
            "Next run: series %d rep %d", self._progress.series, self._progress.rep
        )
        if self._on_recovery_finished is not None and timer is not None:
            self._on_recovery_finished(timer, skipped)
        return True

    def _teardown(self) -> None:
        """Cancel any pending recovery and stop the current run."""
        if self._recovery is not None:
            self._recovery.cancel()
            self._recovery = None
        self._staged = None
        if self._run is not None:
            self._run.stop_and_reset()
            self._run = None
