"""Runtime settings read from the environment (and ``.env`` via python-dotenv).

Entry points call :func:`dotenv.load_dotenv` before :meth:`Settings.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    tick_hz: float = 10.0
    """Stopwatch sampling rate.  0 disables background ticking."""

    recovery_tick_s: float = 1.0
    """Seconds between recovery countdown ticks."""

    feedback: str = "none"
    """Feedback backend: ``"beep"`` or ``"none"``."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            tick_hz=float(env.get("PACE_COACH_TICK_HZ", cls.tick_hz)),
            recovery_tick_s=float(env.get("PACE_COACH_RECOVERY_TICK_S", cls.recovery_tick_s)),
            feedback=env.get("PACE_COACH_FEEDBACK", cls.feedback).strip().lower(),
            log_level=env.get("PACE_COACH_LOG_LEVEL", cls.log_level).strip().upper(),
        )
