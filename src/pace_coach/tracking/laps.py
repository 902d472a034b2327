"""LapTracker — turns "mark" taps into classified laps for the current run."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from pace_coach.pace.calculations import classify_tier, observed_speed
from pace_coach.pace.models import Lap, PaceStatus, RunConfig, SegmentProgress, Tier
from pace_coach.timing.stopwatch import StopwatchEngine, StopwatchState

_logger = logging.getLogger(__name__)

# Segment progress bands, in percent of the target segment time.
ON_TIME_MIN_PERCENT = 98.0
ON_TIME_MAX_PERCENT = 102.0

LapListener = Callable[[Lap], None]


class LapLog:
    """Laps accumulated across the runs of a session, for cumulative statistics."""

    def __init__(self) -> None:
        self._laps: list[Lap] = []

    @property
    def laps(self) -> list[Lap]:
        return list(self._laps)

    def __len__(self) -> int:
        return len(self._laps)

    def append(self, lap: Lap) -> None:
        self._laps.append(lap)

    def remove_last(self, lap: Lap) -> None:
        """Remove the most recent occurrence of *lap*, if present."""
        for i in range(len(self._laps) - 1, -1, -1):
            if self._laps[i] is lap:
                del self._laps[i]
                return

    def clear(self) -> None:
        self._laps.clear()


class LapTracker:
    """Lap history for one run, driven by the run's stopwatch.

    Parameters
    ----------
    stopwatch:
        The :class:`~pace_coach.timing.stopwatch.StopwatchEngine` of the run.
    config:
        Run configuration supplying the observed distance and target speed.
    log:
        Optional :class:`LapLog` shared across runs.  Marks and undos are
        mirrored into it; :meth:`reset_for_new_run` leaves it untouched.
    """

    def __init__(
        self,
        stopwatch: StopwatchEngine,
        config: RunConfig,
        log: LapLog | None = None,
    ) -> None:
        self._stopwatch = stopwatch
        self._config = config
        self._log = log if log is not None else LapLog()
        self._history: list[Lap] = []
        self._last_mark_elapsed = 0.0
        self._current_tier: Tier | None = None
        self._listeners: list[LapListener] = []

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def history(self) -> list[Lap]:
        return list(self._history)

    @property
    def last_mark_elapsed_s(self) -> float:
        return self._last_mark_elapsed

    @property
    def current_tier(self) -> Tier | None:
        """Tier of the latest lap; ``None`` (neutral) when there is none."""
        return self._current_tier

    @property
    def log(self) -> LapLog:
        return self._log

    def progress(self) -> SegmentProgress:
        """Progress through the current segment against the target segment time."""
        segment_elapsed = max(0.0, self._stopwatch.elapsed_s - self._last_mark_elapsed)
        target = self._config.target_segment_s
        if target <= 0 or math.isinf(target):
            percent = 0.0
        else:
            percent = segment_elapsed / target * 100

        if percent < ON_TIME_MIN_PERCENT:
            status = PaceStatus.EARLY
        elif percent <= ON_TIME_MAX_PERCENT:
            status = PaceStatus.ON_TIME
        else:
            status = PaceStatus.LATE
        return SegmentProgress(segment_elapsed_s=segment_elapsed, percent=percent, status=status)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: LapListener) -> None:
        """Register *listener* to receive every new lap."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def mark(self) -> Lap | None:
        """Record a passage now.  Returns the new lap, or None when not running."""
        if self._stopwatch.state is not StopwatchState.RUNNING:
            _logger.debug("mark() ignored in state %s", self._stopwatch.state.value)
            return None

        elapsed = self._stopwatch.tick()
        if self._stopwatch.state is not StopwatchState.RUNNING:
            # The run ended on this very sample.
            return None

        duration = elapsed - self._last_mark_elapsed
        speed = observed_speed(self._config.observation_distance_m, duration)
        lap = Lap(
            lap_number=len(self._history) + 1,
            duration_s=duration,
            observed_speed_kmh=speed,
            tier=classify_tier(speed, self._config.target_speed_kmh),
            cumulative_elapsed_s=elapsed,
        )
        self._history.append(lap)
        self._log.append(lap)
        self._last_mark_elapsed = elapsed
        self._current_tier = lap.tier

        for listener in self._listeners:
            try:
                listener(lap)
            except Exception as exc:
                _logger.warning("Lap listener failed: %s", exc)
        return lap

    def undo_last(self) -> Lap | None:
        """Remove the latest lap and restore the previous baseline.  Returns the removed lap."""
        if not self._history:
            return None
        removed = self._history.pop()
        self._log.remove_last(removed)
        if self._history:
            previous = self._history[-1]
            self._last_mark_elapsed = previous.cumulative_elapsed_s
            self._current_tier = previous.tier
        else:
            self._last_mark_elapsed = 0.0
            self._current_tier = None
        return removed

    def reset_for_new_run(self) -> None:
        """Clear this run's laps; the cross-run log is kept."""
        self._history.clear()
        self._last_mark_elapsed = 0.0
        self._current_tier = None

    def reset_all(self) -> None:
        """Clear this run's laps and the cross-run log."""
        self.reset_for_new_run()
        self._log.clear()
