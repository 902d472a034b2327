"""Feedback notifiers — winsound beeps with NullNotifier for tests.

The core only ever calls ``notify(event)``; which device (if any) reacts is
up to the platform adapter.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum

_logger = logging.getLogger(__name__)


class FeedbackKind(str, Enum):
    MARK = "mark"
    UNDO = "undo"
    RECOVERY_WARNING = "recovery_warning"
    RECOVERY_COMPLETE = "recovery_complete"
    RUN_COMPLETE = "run_complete"


@dataclass(frozen=True)
class FeedbackEvent:
    kind: FeedbackKind
    payload: dict = field(default_factory=dict)


@dataclass
class FeedbackConfig:
    """Beep patterns per event kind, as ``(freq_hz, duration_ms)`` sequences."""

    mark: tuple[tuple[int, int], ...] = ((1000, 50),)
    undo: tuple[tuple[int, int], ...] = ((600, 100), (600, 100))
    recovery_warning: tuple[tuple[int, int], ...] = ((800, 300),)
    recovery_complete: tuple[tuple[int, int], ...] = ((1200, 150), (1200, 150), (1200, 150))
    run_complete: tuple[tuple[int, int], ...] = ((1200, 400),)
    gap_ms: int = 50  # silence between beeps of one pattern

    def pattern(self, kind: FeedbackKind) -> tuple[tuple[int, int], ...]:
        return getattr(self, kind.value)


class NullNotifier:
    """No-op notifier; records events for test assertions."""

    def __init__(self) -> None:
        self.events: list[FeedbackEvent] = []

    def notify(self, event: FeedbackEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[FeedbackKind]:
        return [e.kind for e in self.events]


class BeepNotifier:
    """Plays beep patterns via winsound.Beep in a daemon thread (non-blocking)."""

    def __init__(self, config: FeedbackConfig | None = None) -> None:
        self._cfg = config or FeedbackConfig()

    def notify(self, event: FeedbackEvent) -> None:
        if sys.platform != "win32":
            return
        threading.Thread(
            target=self._play, args=(self._cfg.pattern(event.kind),), daemon=True
        ).start()

    def _play(self, pattern: tuple[tuple[int, int], ...]) -> None:
        import winsound

        for i, (freq, duration_ms) in enumerate(pattern):
            if i:
                time.sleep(self._cfg.gap_ms / 1000)
            winsound.Beep(freq, duration_ms)


def safe_notify(notifier, event: FeedbackEvent) -> None:
    """Deliver *event* to *notifier*, logging instead of raising on failure."""
    if notifier is None:
        return
    try:
        notifier.notify(event)
    except Exception as exc:
        _logger.warning("Feedback notifier failed on %s: %s", event.kind.value, exc)


def make_notifier(name: str):
    """Return the notifier registered under *name* (``"beep"`` or ``"none"``)."""
    if name == "beep":
        return BeepNotifier()
    if name in ("none", ""):
        return NullNotifier()
    raise ValueError(f"unknown feedback backend {name!r}")
