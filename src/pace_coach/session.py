"""CoachSession — the single entry point used by the presentation layer.

Every control and every background tick goes through one re-entrant lock,
so stopwatch, lap and series state are only ever mutated one call at a time.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from collections.abc import Callable

from pace_coach.config import Settings
from pace_coach.feedback.notifier import FeedbackEvent, FeedbackKind, make_notifier, safe_notify
from pace_coach.pace.calculations import assess_performance, format_time, pace_table, plan_run
from pace_coach.pace.models import Assessment, Lap, PaceTableRow, RunConfig, RunPlan
from pace_coach.series.controller import SeriesController
from pace_coach.series.models import (
    PerformanceRecord,
    SeriesProgress,
    SeriesState,
    ValidationOutcome,
)
from pace_coach.timing.recovery import RecoveryTimer
from pace_coach.timing.ticker import Ticker
from pace_coach.tracking.laps import LapLog
from pace_coach.tracking.run import Run
from pace_coach.tracking.stats import SpeedStats, lap_stats

_logger = logging.getLogger(__name__)

RecoveryListener = Callable[[RecoveryTimer, bool], None]


class CoachSession:
    """Owns the current run, the series controller and the tickers driving them.

    Outside a series the session uses its own free run; while a series is
    active the controller's current run is used instead.

    Parameters
    ----------
    config:
        Initial :class:`~pace_coach.pace.models.RunConfig` (defaults if None).
    notifier:
        Feedback port with ``notify(event)``; failures are logged and ignored.
    tick_hz:
        Stopwatch sampling rate of the background ticker.  ``0`` disables
        background ticking entirely; readouts still resample the clock.
    recovery_tick_s:
        Recovery countdown period.
    _time_fn:
        Callable returning monotonic seconds — injectable for testing.
    """

    def __init__(
        self,
        config: RunConfig | None = None,
        notifier=None,
        tick_hz: float = 10.0,
        recovery_tick_s: float = 1.0,
        _time_fn=time.monotonic,
    ) -> None:
        self._lock = threading.RLock()
        self._config = config or RunConfig()
        self._notifier = notifier
        self._tick_interval = 1.0 / tick_hz if tick_hz > 0 else None
        self._recovery_tick_s = recovery_tick_s
        self._time_fn = _time_fn

        self._log = LapLog()
        self._timed_run: Run | None = None
        self._run_ticker: Ticker | None = None
        self._recovery_ticker: Ticker | None = None
        self._recovery_listeners: list[RecoveryListener] = []

        self._series = SeriesController(
            self._new_run,
            recovery_tick_s=recovery_tick_s,
            on_recovery_started=self._on_recovery_started,
            on_recovery_finished=self._on_recovery_finished,
            on_recovery_warning=self._on_recovery_warning,
        )
        self._free_run = self._new_run()

    @classmethod
    def from_settings(cls, settings: Settings, config: RunConfig | None = None) -> CoachSession:
        return cls(
            config=config,
            notifier=make_notifier(settings.feedback),
            tick_hz=settings.tick_hz,
            recovery_tick_s=settings.recovery_tick_s,
        )

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def config(self) -> RunConfig:
        return self._config

    @property
    def series(self) -> SeriesController:
        return self._series

    @property
    def run(self) -> Run:
        """The run the run controls currently act on."""
        if self._series.state is not SeriesState.INACTIVE and self._series.active_run is not None:
            return self._series.active_run
        return self._free_run

    @property
    def elapsed_s(self) -> float:
        with self._lock:
            self._sample()
            return self.run.stopwatch.elapsed_s

    @property
    def remaining_s(self) -> float:
        with self._lock:
            self._sample()
            return self.run.stopwatch.remaining_s

    def laps(self) -> list[Lap]:
        """Laps of the current run."""
        with self._lock:
            return self.run.laps.history

    def session_laps(self) -> list[Lap]:
        """Laps of every run since the last full reset."""
        with self._lock:
            return self._log.laps

    def lap_stats(self) -> SpeedStats | None:
        with self._lock:
            return lap_stats(self._log.laps)

    def performance_history(self) -> list[PerformanceRecord]:
        with self._lock:
            return self._series.performance_history

    def performance_stats(self) -> SpeedStats | None:
        with self._lock:
            return self._series.performance_stats()

    def plan(self) -> RunPlan:
        return plan_run(self._config)

    def pace_table(self) -> list[PaceTableRow]:
        cfg = self._config
        return pace_table(
            cfg.track_length_m, cfg.marker_distance_m, cfg.target_segment_s, cfg.observe_half_lap
        )

    def snapshot(self) -> dict:
        """Everything the live run panel displays, freshly sampled."""
        with self._lock:
            self._sample()
            run = self.run
            timer = run.stopwatch.snapshot()
            progress = run.laps.progress()
            tier = run.laps.current_tier
            return {
                "elapsed_s": timer.elapsed_s,
                "remaining_s": timer.remaining_s,
                "elapsed": format_time(timer.elapsed_s),
                "remaining": format_time(timer.remaining_s),
                "is_running": timer.is_running,
                "is_paused": timer.is_paused,
                "finished": run.finished,
                "target_speed_kmh": self._config.target_speed_kmh,
                "target_segment_s": self._config.target_segment_s,
                "current_tier": tier.value if tier is not None else None,
                "current_color": tier.color if tier is not None else "gray",
                "segment_elapsed_s": progress.segment_elapsed_s,
                "progress_percent": progress.percent,
                "pace_status": progress.status.value,
                "laps": [lap.to_dict() for lap in run.laps.history],
            }

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, **changes) -> bool:
        """Change run parameters.  Refused (False) while a run is in progress or resting.

        A change discards the laps of the current, idle run.
        """
        with self._lock:
            if self.run.stopwatch.is_running or self._series.state is SeriesState.RECOVERY:
                return False
            self._config = dataclasses.replace(self._config, **changes)
            self._free_run = self._new_run()
            self._series.renew_run()
            _logger.info("Configuration changed: %s", changes)
            return True

    def reset_all(self) -> None:
        """Back to default parameters with no laps, no history and no series."""
        with self._lock:
            self._stop_run_ticker()
            self._series.cancel_series()
            self._stop_recovery_ticker()
            self._free_run.laps.reset_all()
            self._config = RunConfig()
            self._free_run = self._new_run()
            _logger.info("Session reset")

    # ------------------------------------------------------------------
    # Run controls
    # ------------------------------------------------------------------

    def start(self) -> bool:
        with self._lock:
            if self._series.state in (SeriesState.RECOVERY, SeriesState.COMPLETE):
                return False
            run = self.run
            if not run.start():
                return False
            _logger.info(
                "Run started: %.1f min at %.1f km/h",
                self._config.duration_min,
                self._config.target_speed_kmh,
            )
            self._start_run_ticker(run)
            return True

    def pause_or_resume(self) -> bool:
        with self._lock:
            run = self.run
            applied = run.pause_or_resume()
            self._check_finished(run)
            return applied

    def stop_and_reset(self) -> None:
        with self._lock:
            self._stop_run_ticker()
            self.run.stop_and_reset()

    def mark(self) -> Lap | None:
        with self._lock:
            run = self.run
            lap = run.mark()
            self._check_finished(run)
            return lap

    def undo_last(self) -> Lap | None:
        with self._lock:
            lap = self.run.undo_last()
            if lap is not None:
                safe_notify(self._notifier, FeedbackEvent(FeedbackKind.UNDO, lap.to_dict()))
            return lap

    # ------------------------------------------------------------------
    # Series controls
    # ------------------------------------------------------------------

    def create_series(
        self,
        total_series: int,
        reps_per_series: int,
        recovery_between_reps_s: float = 0.0,
        recovery_between_series_s: float = 0.0,
    ) -> SeriesProgress:
        """Start a series.  Raises :class:`~pace_coach.series.models.InvalidConfig`."""
        with self._lock:
            progress = self._series.create_series(
                total_series,
                reps_per_series,
                recovery_between_reps_s,
                recovery_between_series_s,
            )
            self._stop_run_ticker()
            self._stop_recovery_ticker()
            self._free_run.stop_and_reset()
            return progress

    def cancel_series(self) -> None:
        """Discard the series.  Ignored when no series exists."""
        with self._lock:
            if self._series.state is SeriesState.INACTIVE:
                return
            self._stop_run_ticker()
            self._series.cancel_series()
            self._stop_recovery_ticker()
            self._free_run = self._new_run()

    def validate_performance(
        self,
        assessment: Assessment | None = None,
        laps: int | None = None,
        markers: int = 0,
    ) -> ValidationOutcome | None:
        """Validate the current series run.

        Pass either an explicit *assessment*, or the completed *laps* plus
        extra *markers* to have it computed from the configuration.
        """
        with self._lock:
            if assessment is None and laps is not None:
                assessment = assess_performance(self._config, laps, markers)
            outcome = self._series.validate_performance(assessment)
            if outcome is not None and not outcome.completed:
                self._stop_run_ticker()
            return outcome

    def skip_recovery(self) -> bool:
        with self._lock:
            return self._series.skip_recovery()

    def add_recovery_listener(self, listener: RecoveryListener) -> None:
        """Register *listener* to be told ``(timer, skipped)`` when a recovery ends."""
        self._recovery_listeners.append(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop and join every background ticker."""
        with self._lock:
            tickers = [t for t in (self._run_ticker, self._recovery_ticker) if t is not None]
            self._run_ticker = None
            self._recovery_ticker = None
        for ticker in tickers:
            ticker.join()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _new_run(self) -> Run:
        run = Run(self._config, self._log, _time_fn=self._time_fn)
        run.laps.subscribe(self._on_lap)
        return run

    def _on_lap(self, lap: Lap) -> None:
        safe_notify(self._notifier, FeedbackEvent(FeedbackKind.MARK, lap.to_dict()))

    def _sample(self) -> None:
        run = self.run
        run.tick()
        self._check_finished(run)

    def _check_finished(self, run: Run) -> None:
        """Report the end of *run* once, the first time it is seen auto-stopped."""
        if run.finished and run is self._timed_run:
            self._stop_run_ticker()
            _logger.info("Run complete: %d laps", len(run.laps.history))
            safe_notify(
                self._notifier,
                FeedbackEvent(FeedbackKind.RUN_COMPLETE, {"laps": len(run.laps.history)}),
            )

    def _start_run_ticker(self, run: Run) -> None:
        self._stop_run_ticker()
        self._timed_run = run
        if self._tick_interval is None:
            return
        ticker = Ticker(lambda: self._on_run_tick(run, ticker), self._tick_interval, "RunTicker")
        self._run_ticker = ticker
        ticker.start()

    def _on_run_tick(self, run: Run, ticker: Ticker) -> None:
        with self._lock:
            if ticker is not self._run_ticker or run is not self.run:
                return
            run.tick()
            self._check_finished(run)

    def _stop_run_ticker(self) -> None:
        self._timed_run = None
        if self._run_ticker is not None:
            self._run_ticker.stop()
            self._run_ticker = None

    def _on_recovery_started(self, timer: RecoveryTimer) -> None:
        self._stop_recovery_ticker()
        if self._tick_interval is None:
            return
        ticker = Ticker(
            lambda: self._on_recovery_tick(timer, ticker), self._recovery_tick_s, "RecoveryTicker"
        )
        self._recovery_ticker = ticker
        ticker.start()

    def _on_recovery_tick(self, timer: RecoveryTimer, ticker: Ticker) -> None:
        with self._lock:
            if ticker is not self._recovery_ticker or timer is not self._series.recovery:
                return
            timer.tick()

    def _on_recovery_warning(self, timer: RecoveryTimer) -> None:
        safe_notify(
            self._notifier,
            FeedbackEvent(FeedbackKind.RECOVERY_WARNING, {"remaining_s": timer.remaining_s}),
        )

    def _on_recovery_finished(self, timer: RecoveryTimer, skipped: bool) -> None:
        self._stop_recovery_ticker()
        safe_notify(
            self._notifier,
            FeedbackEvent(
                FeedbackKind.RECOVERY_COMPLETE,
                {"type": timer.recovery_type.value, "skipped": skipped},
            ),
        )
        for listener in self._recovery_listeners:
            try:
                listener(timer, skipped)
            except Exception as exc:
                _logger.warning("Recovery listener failed: %s", exc)

    def _stop_recovery_ticker(self) -> None:
        if self._recovery_ticker is not None:
            self._recovery_ticker.stop()
            self._recovery_ticker = None
