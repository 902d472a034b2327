"""Lap capture, run ownership and cumulative statistics."""

from pace_coach.tracking.laps import (
    ON_TIME_MAX_PERCENT,
    ON_TIME_MIN_PERCENT,
    LapLog,
    LapTracker,
)
from pace_coach.tracking.run import Run
from pace_coach.tracking.stats import SpeedStats, lap_stats, summarize

__all__ = [
    "ON_TIME_MAX_PERCENT",
    "ON_TIME_MIN_PERCENT",
    "LapLog",
    "LapTracker",
    "Run",
    "SpeedStats",
    "lap_stats",
    "summarize",
]
