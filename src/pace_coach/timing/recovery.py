"""RecoveryTimer — one-shot rest countdown between repetitions or series."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

_logger = logging.getLogger(__name__)

# Remaining seconds at which the "get ready" warning fires.
WARNING_THRESHOLD_S = 15


class RecoveryType(str, Enum):
    REP = "rep"
    SERIES = "series"


class RecoveryTimer:
    """Counts down from *duration_s* by one second per :meth:`tick`.

    The "get ready" warning fires once, on the tick where the remaining time
    drops to :data:`WARNING_THRESHOLD_S` or below.  A countdown that starts at
    or under the threshold warns as soon as it starts.  Completion (reaching
    zero or :meth:`skip`) fires ``on_complete(timer, skipped)`` exactly once;
    :meth:`cancel` tears the timer down silently.  Every tick after the timer
    has finished is a no-op.

    Parameters
    ----------
    duration_s:
        Countdown length in seconds.
    recovery_type:
        Whether this rest separates two repetitions or two series.
    on_complete:
        Called with ``(timer, skipped)`` when the countdown ends.
    on_warning:
        Called with ``(timer,)`` when the warning fires.
    tick_s:
        Seconds removed per tick (1 Hz reference cadence).
    """

    def __init__(
        self,
        duration_s: float,
        recovery_type: RecoveryType = RecoveryType.REP,
        on_complete: Callable[[RecoveryTimer, bool], None] | None = None,
        on_warning: Callable[[RecoveryTimer], None] | None = None,
        tick_s: float = 1.0,
    ) -> None:
        self.duration_s = max(0.0, duration_s)
        self.recovery_type = recovery_type
        self._on_complete = on_complete
        self._on_warning = on_warning
        self._tick_s = tick_s
        self._remaining = self.duration_s
        self._started = False
        self._finished = False
        self._skipped = False
        self._cancelled = False
        self._warned = False

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def remaining_s(self) -> float:
        return self._remaining

    @property
    def started(self) -> bool:
        return self._started

    @property
    def finished(self) -> bool:
        """True after completion, skip or cancel."""
        return self._finished

    @property
    def skipped(self) -> bool:
        return self._skipped

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def warned(self) -> bool:
        return self._warned

    @property
    def in_warning(self) -> bool:
        """True while the countdown is inside the warning window."""
        return not self._finished and 0 < self._remaining <= WARNING_THRESHOLD_S

    @property
    def progress_percent(self) -> float:
        if self.duration_s == 0:
            return 100.0
        return (self.duration_s - self._remaining) / self.duration_s * 100

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin the countdown; a zero-length countdown completes immediately."""
        if self._started or self._finished:
            return
        self._started = True
        _logger.info(
            "Recovery (%s) started: %.0fs", self.recovery_type.value, self.duration_s
        )
        if self._remaining <= 0:
            self._complete(skipped=False)
            return
        if self._remaining <= WARNING_THRESHOLD_S:
            self._warn()

    def tick(self) -> None:
        """Remove one tick from the countdown."""
        if not self._started or self._finished:
            return
        before = self._remaining
        self._remaining = max(0.0, before - self._tick_s)
        if self._remaining <= 0:
            self._complete(skipped=False)
            return
        if before > WARNING_THRESHOLD_S >= self._remaining:
            self._warn()

    def skip(self) -> None:
        """End the countdown now; signals the same completion as reaching zero."""
        if self._finished:
            return
        self._started = True
        self._complete(skipped=True)

    def cancel(self) -> None:
        """Tear the countdown down without a completion signal."""
        if self._finished:
            return
        self._finished = True
        self._cancelled = True
        _logger.info("Recovery (%s) cancelled", self.recovery_type.value)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _warn(self) -> None:
        if self._warned:
            return
        self._warned = True
        if self._on_warning is not None:
            self._on_warning(self)

    def _complete(self, skipped: bool) -> None:
        self._finished = True
        self._skipped = skipped
        if skipped:
            _logger.info(
                "Recovery (%s) skipped with %.0fs left",
                self.recovery_type.value,
                self._remaining,
            )
        else:
            self._remaining = 0.0
            _logger.info("Recovery (%s) complete", self.recovery_type.value)
        if self._on_complete is not None:
            self._on_complete(self, skipped)
