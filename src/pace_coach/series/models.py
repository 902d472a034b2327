"""Series data models — configuration, progress and performance records."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum

from pace_coach.pace.models import Assessment, Tier
from pace_coach.timing.recovery import RecoveryType


class InvalidConfig(ValueError):
    """Raised when a series is created with fewer than one series or repetition."""


class SeriesState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    """A series is configured and a run is ready or in progress."""
    RECOVERY = "recovery"
    """Resting between two runs; the next progress is staged."""
    COMPLETE = "complete"
    """The final repetition has been validated."""


@dataclass(frozen=True)
class SeriesConfig:
    total_series: int
    reps_per_series: int
    recovery_between_reps_s: float = 0.0
    recovery_between_series_s: float = 0.0

    def validate(self) -> None:
        """Raise :class:`InvalidConfig` if a count is below 1."""
        if self.total_series < 1 or self.reps_per_series < 1:
            raise InvalidConfig(
                f"series and repetitions must be >= 1 "
                f"(got {self.total_series} x {self.reps_per_series})"
            )


@dataclass(frozen=True)
class SeriesProgress:
    """Current position in the training structure (1-based)."""

    series: int = 1
    rep: int = 1


@dataclass(frozen=True)
class PerformanceRecord:
    """Validated outcome of one run of a series."""

    series: int
    rep: int
    actual_distance_m: float
    actual_speed_kmh: float
    actual_vma_percent: float
    deviation_tier: Tier

    @classmethod
    def from_assessment(cls, progress: SeriesProgress, assessment: Assessment) -> PerformanceRecord:
        return cls(
            series=progress.series,
            rep=progress.rep,
            actual_distance_m=assessment.actual_distance_m,
            actual_speed_kmh=assessment.actual_speed_kmh,
            actual_vma_percent=assessment.actual_vma_percent,
            deviation_tier=assessment.deviation_tier,
        )

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d["deviation_tier"] = self.deviation_tier.value
        return d


@dataclass(frozen=True)
class ValidationOutcome:
    """What happened after a performance was validated.

    When ``completed`` is True the series is over and no recovery follows;
    otherwise ``recovery_type``/``recovery_s`` describe the rest that was
    started and ``next_progress`` the run that follows it.
    """

    record: PerformanceRecord
    completed: bool
    recovery_type: RecoveryType | None = None
    recovery_s: float = 0.0
    next_progress: SeriesProgress | None = None
