"""Cumulative speed statistics over laps or validated performances."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from pace_coach.pace.models import Lap, Tier


@dataclass(frozen=True)
class SpeedStats:
    """Min/avg/max speed and tier distribution of a set of observations.

    ``tier_counts`` always holds every tier, in tier order, with 0 for
    absent tiers.
    """

    count: int
    min_speed_kmh: float
    avg_speed_kmh: float
    max_speed_kmh: float
    tier_counts: dict[Tier, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "min_speed_kmh": self.min_speed_kmh,
            "avg_speed_kmh": self.avg_speed_kmh,
            "max_speed_kmh": self.max_speed_kmh,
            "tier_counts": {t.value: n for t, n in self.tier_counts.items()},
        }


def summarize(samples: Iterable[tuple[float, Tier]]) -> SpeedStats | None:
    """Return statistics for ``(speed_kmh, tier)`` samples, or None if there are none."""
    samples = list(samples)
    if not samples:
        return None
    speeds = [s for s, _ in samples]
    counts = {t: 0 for t in Tier}
    for _, tier in samples:
        counts[tier] += 1
    return SpeedStats(
        count=len(samples),
        min_speed_kmh=min(speeds),
        avg_speed_kmh=sum(speeds) / len(speeds),
        max_speed_kmh=max(speeds),
        tier_counts=counts,
    )


def lap_stats(laps: Iterable[Lap]) -> SpeedStats | None:
    """Statistics over observed lap speeds."""
    return summarize((lap.observed_speed_kmh, lap.tier) for lap in laps)
