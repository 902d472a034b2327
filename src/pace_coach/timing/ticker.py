"""Ticker — periodic background callback with deterministic cancellation."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

_logger = logging.getLogger(__name__)


class Ticker:
    """Calls *callback* every *interval_s* seconds on a daemon thread.

    The loop waits on a stop event rather than sleeping, so :meth:`stop`
    takes effect at the next wake-up.  Once :meth:`stop` has been called the
    callback is never invoked again, except for a call that was already in
    progress; callers that need a hard guarantee run their callback under
    the same lock they hold while stopping and check :attr:`stopped`.

    Parameters
    ----------
    callback:
        Zero-argument callable.  Exceptions are logged and the loop continues.
    interval_s:
        Target period in seconds.  The wait is shortened by the time the
        callback took, keeping the cadence close to the target.
    name:
        Thread name, for debugging.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_s: float,
        name: str = "Ticker",
    ) -> None:
        self._callback = callback
        self._interval = interval_s
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self._name)
        self._thread.start()

    def stop(self) -> None:
        """Signal the thread to exit.  Does not block."""
        self._stop_event.set()

    def join(self, timeout: float = 2.0) -> None:
        """Stop and wait for the thread to exit.

        Must not be called while holding a lock the callback acquires.
        """
        self.stop()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        wait = self._interval
        while not self._stop_event.wait(wait):
            t0 = time.monotonic()
            try:
                self._callback()
            except Exception:
                _logger.exception("%s callback failed", self._name)
            wait = max(0.0, self._interval - (time.monotonic() - t0))
