"""Pace data models — run configuration, laps, tiers and plans."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Tier(str, Enum):
    """How close an observed speed is to the target speed.

    Members are declared from closest to furthest; :attr:`rank` follows that
    order so tiers can be sorted and compared.
    """

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @property
    def color(self) -> str:
        """Display colour used by the presentation layer."""
        return _TIER_COLORS[self]


_TIER_ORDER: tuple[Tier, ...] = (Tier.EXCELLENT, Tier.GOOD, Tier.FAIR, Tier.POOR)

_TIER_COLORS: dict[Tier, str] = {
    Tier.EXCELLENT: "blue",
    Tier.GOOD: "green",
    Tier.FAIR: "yellow",
    Tier.POOR: "red",
}


class PaceStatus(str, Enum):
    """Position of the runner relative to the target time for the current segment."""

    EARLY = "early"
    ON_TIME = "on time"
    LATE = "late"


@dataclass(frozen=True)
class RunConfig:
    """Parameters shared by every run of a run-set.

    Values are not range-checked here: coaches may set degenerate values
    transiently while adjusting controls, and every derived quantity guards
    against them.
    """

    track_length_m: float = 200.0
    """Length of one track loop in metres."""

    vma_kmh: float = 12.0
    """Runner's maximal aerobic speed in km/h."""

    vma_percent: float = 80.0
    """Target intensity as a percentage of VMA (60–120 by convention)."""

    duration_min: float = 3.0
    """Run duration in minutes."""

    marker_distance_m: float = 10.0
    """Spacing of the cones/markers laid along the track, in metres."""

    observe_half_lap: bool = False
    """If True, a mark is expected every half loop instead of every loop."""

    @property
    def target_speed_kmh(self) -> float:
        return self.vma_kmh * self.vma_percent / 100

    @property
    def observation_distance_m(self) -> float:
        """Distance covered between two consecutive marks."""
        return self.track_length_m / 2 if self.observe_half_lap else self.track_length_m

    @property
    def target_segment_s(self) -> float:
        """Target time for one observed segment; ``inf`` if the target speed is 0."""
        from pace_coach.pace.calculations import segment_time

        return segment_time(self.observation_distance_m, self.target_speed_kmh)

    @property
    def total_duration_s(self) -> float:
        return self.duration_min * 60


@dataclass(frozen=True)
class Lap:
    """One observed segment between two marks."""

    lap_number: int
    """1-based, contiguous within a run."""

    duration_s: float
    """Time since the previous mark (or since the start for the first lap)."""

    observed_speed_kmh: float

    tier: Tier

    cumulative_elapsed_s: float
    """Stopwatch elapsed time when the mark was taken."""

    def to_dict(self) -> dict:
        return {
            "lap_number": self.lap_number,
            "duration_s": self.duration_s,
            "observed_speed_kmh": self.observed_speed_kmh,
            "tier": self.tier.value,
            "color": self.tier.color,
            "cumulative_elapsed_s": self.cumulative_elapsed_s,
        }


@dataclass(frozen=True)
class SegmentProgress:
    """Live progress through the segment currently being run."""

    segment_elapsed_s: float
    percent: float
    status: PaceStatus


@dataclass(frozen=True)
class RunPlan:
    """What the runner should cover for a configuration (exercise summary)."""

    target_speed_kmh: float
    total_distance_m: float
    full_laps: int
    remaining_m: float
    markers: int
    target_segment_s: float


@dataclass(frozen=True)
class PaceTableRow:
    """Target passage time at one marker of the observed segment."""

    marker: int
    distance_m: float
    time_s: float
    speed_kmh: float


@dataclass(frozen=True)
class Assessment:
    """Measured outcome of one run, as entered by the coach at validation time."""

    actual_distance_m: float
    actual_speed_kmh: float
    actual_vma_percent: float
    deviation_tier: Tier
