"""StopwatchEngine — drift-free elapsed/remaining time with pause and resume."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum

_logger = logging.getLogger(__name__)


class StopwatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    """Auto-stopped at the end of the run; keeps the final elapsed value."""


@dataclass(frozen=True)
class TimerState:
    """Snapshot of a stopwatch.  ``is_paused`` implies ``is_running``."""

    elapsed_s: float
    remaining_s: float
    is_running: bool
    is_paused: bool


class StopwatchEngine:
    """Elapsed-time tracker for one run.

    Elapsed time is recomputed from the clock on every :meth:`tick` as
    ``now - start - accumulated_pause`` rather than incremented by the tick
    period, so late or missed ticks only delay the readout.

    Controls called from the wrong state are ignored and return ``False``.

    Parameters
    ----------
    total_duration_s:
        Run length.  When positive, the engine stops by itself once elapsed
        reaches it.  ``None`` or a non-positive value means open-ended.
    _time_fn:
        Callable returning monotonic seconds — injectable for testing.
    """

    def __init__(
        self,
        total_duration_s: float | None = None,
        _time_fn=time.monotonic,
    ) -> None:
        self._total = total_duration_s if total_duration_s and total_duration_s > 0 else None
        self._time_fn = _time_fn
        self._state = StopwatchState.IDLE
        self._elapsed = 0.0
        self._start_at: float | None = None
        self._paused_total = 0.0
        self._paused_at: float | None = None

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def state(self) -> StopwatchState:
        return self._state

    @property
    def total_duration_s(self) -> float | None:
        return self._total

    @property
    def elapsed_s(self) -> float:
        """Elapsed time as of the last sample (tick, pause or mark)."""
        return self._elapsed

    @property
    def remaining_s(self) -> float:
        if self._total is None:
            return 0.0
        return max(0.0, self._total - self._elapsed)

    @property
    def is_running(self) -> bool:
        return self._state in (StopwatchState.RUNNING, StopwatchState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._state is StopwatchState.PAUSED

    @property
    def finished(self) -> bool:
        """True once the engine has auto-stopped at the end of the run."""
        return self._state is StopwatchState.STOPPED

    def snapshot(self) -> TimerState:
        return TimerState(
            elapsed_s=self._elapsed,
            remaining_s=self.remaining_s,
            is_running=self.is_running,
            is_paused=self.is_paused,
        )

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start from zero.  Valid from IDLE or after an auto-stop."""
        if self._state not in (StopwatchState.IDLE, StopwatchState.STOPPED):
            _logger.debug("start() ignored in state %s", self._state.value)
            return False
        self._start_at = self._time_fn()
        self._paused_total = 0.0
        self._paused_at = None
        self._elapsed = 0.0
        self._state = StopwatchState.RUNNING
        return True

    def pause(self) -> bool:
        """Freeze elapsed accumulation.  Valid only while RUNNING."""
        if self._state is not StopwatchState.RUNNING:
            _logger.debug("pause() ignored in state %s", self._state.value)
            return False
        now = self._time_fn()
        self._sample(now)
        if self._state is not StopwatchState.RUNNING:
            # The sample above reached the end of the run.
            return False
        self._paused_at = now
        self._state = StopwatchState.PAUSED
        return True

    def resume(self) -> bool:
        """Continue after a pause.  Valid only while PAUSED."""
        if self._state is not StopwatchState.PAUSED:
            _logger.debug("resume() ignored in state %s", self._state.value)
            return False
        self._paused_total += self._time_fn() - self._paused_at
        self._paused_at = None
        self._state = StopwatchState.RUNNING
        return True

    def stop(self) -> None:
        """Return to IDLE with elapsed reset to 0."""
        self._state = StopwatchState.IDLE
        self._elapsed = 0.0
        self._start_at = None
        self._paused_total = 0.0
        self._paused_at = None

    def reset(self) -> None:
        """Alias of :meth:`stop`; idempotent."""
        self.stop()

    def tick(self) -> float:
        """Resample the clock while RUNNING and return the elapsed time.

        A no-op in any other state, so a late tick can never revive a
        stopped engine.
        """
        if self._state is StopwatchState.RUNNING:
            self._sample(self._time_fn())
        return self._elapsed

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _sample(self, now: float) -> None:
        elapsed = max(0.0, now - self._start_at - self._paused_total)
        if self._total is not None and elapsed >= self._total:
            self._elapsed = self._total
            self._state = StopwatchState.STOPPED
            self._start_at = None
            _logger.info("Run finished after %.1fs", self._total)
            return
        self._elapsed = elapsed
