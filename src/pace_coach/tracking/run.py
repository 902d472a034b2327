"""Run — the stopwatch and lap tracker owned by a single timed run."""

from __future__ import annotations

import time

from pace_coach.pace.models import Lap, RunConfig
from pace_coach.timing.stopwatch import StopwatchEngine
from pace_coach.tracking.laps import LapLog, LapTracker


class Run:
    """One timed run: a fresh :class:`StopwatchEngine` + :class:`LapTracker` pair.

    A run is never reused; the owner creates a new instance for the next
    repetition and discards this one.
    """

    def __init__(
        self,
        config: RunConfig,
        log: LapLog | None = None,
        _time_fn=time.monotonic,
    ) -> None:
        self.config = config
        self.stopwatch = StopwatchEngine(config.total_duration_s, _time_fn=_time_fn)
        self.laps = LapTracker(self.stopwatch, config, log)

    @property
    def finished(self) -> bool:
        return self.stopwatch.finished

    def start(self) -> bool:
        """Start the stopwatch with an empty lap history."""
        if self.stopwatch.is_running:
            return False
        self.laps.reset_for_new_run()
        return self.stopwatch.start()

    def pause_or_resume(self) -> bool:
        if self.stopwatch.is_paused:
            return self.stopwatch.resume()
        return self.stopwatch.pause()

    def stop_and_reset(self) -> None:
        self.stopwatch.reset()

    def mark(self) -> Lap | None:
        return self.laps.mark()

    def undo_last(self) -> Lap | None:
        return self.laps.undo_last()

    def tick(self) -> float:
        return self.stopwatch.tick()

    def reset_for_new_run(self) -> None:
        """Stop the stopwatch and clear this run's laps (cross-run log kept)."""
        self.stopwatch.reset()
        self.laps.reset_for_new_run()
