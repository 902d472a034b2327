"""Training series progression (series × repetitions with recovery)."""

from pace_coach.series.controller import SeriesController
from pace_coach.series.models import (
    InvalidConfig,
    PerformanceRecord,
    SeriesConfig,
    SeriesProgress,
    SeriesState,
    ValidationOutcome,
)

__all__ = [
    "InvalidConfig",
    "PerformanceRecord",
    "SeriesConfig",
    "SeriesController",
    "SeriesProgress",
    "SeriesState",
    "ValidationOutcome",
]
