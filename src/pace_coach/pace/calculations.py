"""Pace arithmetic — VMA, distances, lap counts and speed classification.

Every function here is pure: identical input gives identical output, with no
clock reads and no module state.  Degenerate inputs (zero speed, zero time)
short-circuit to a safe value instead of raising.
"""

from __future__ import annotations

import math

from pace_coach.pace.models import Assessment, PaceTableRow, RunConfig, RunPlan, Tier

# Tier thresholds on |observed - target|, in km/h.
EXCELLENT_MAX_DIFF_KMH = 0.2
GOOD_MAX_DIFF_KMH = 0.5
FAIR_MAX_DIFF_KMH = 1.5

_KMH_TO_MS = 1000 / 3600
_MS_TO_KMH = 3.6


def target_speed(vma_kmh: float, vma_percent: float) -> float:
    """Return the target speed in km/h for *vma_percent* of *vma_kmh*."""
    return vma_kmh * vma_percent / 100


def total_distance(speed_kmh: float, duration_min: float) -> float:
    """Return the distance in metres covered at *speed_kmh* for *duration_min*."""
    return speed_kmh * 1000 * duration_min / 60


def laps_and_remainder(distance_m: float, track_length_m: float) -> tuple[int, float]:
    """Split *distance_m* into full track loops and the remaining metres."""
    if track_length_m <= 0:
        return 0, distance_m
    full_laps = math.floor(distance_m / track_length_m)
    return full_laps, distance_m % track_length_m


def markers_from_remainder(remaining_m: float, marker_distance_m: float) -> int:
    """Return the nearest marker count for *remaining_m* (halves round up)."""
    if marker_distance_m <= 0:
        return 0
    return math.floor(remaining_m / marker_distance_m + 0.5)


def segment_time(distance_m: float, speed_kmh: float) -> float:
    """Return the seconds needed to cover *distance_m* at *speed_kmh*.

    Returns ``math.inf`` when the speed is zero or negative.
    """
    if speed_kmh <= 0:
        return math.inf
    return distance_m / (speed_kmh * _KMH_TO_MS)


def observed_speed(distance_m: float, elapsed_s: float) -> float:
    """Return the speed in km/h for *distance_m* covered in *elapsed_s*; 0 if no time elapsed."""
    if elapsed_s <= 0:
        return 0.0
    return distance_m / elapsed_s * _MS_TO_KMH


def distance_from_laps_and_markers(
    laps: int,
    markers: int,
    track_length_m: float,
    marker_distance_m: float,
) -> float:
    """Return the distance in metres for full *laps* plus extra *markers*."""
    return laps * track_length_m + markers * marker_distance_m


def classify_tier(observed_kmh: float, target_kmh: float) -> Tier:
    """Classify how close *observed_kmh* is to *target_kmh*.

    The difference is rounded to 9 decimals first so that binary float noise
    does not push a value written as exactly 0.2 over a threshold.
    """
    diff = round(abs(observed_kmh - target_kmh), 9)
    if diff <= EXCELLENT_MAX_DIFF_KMH:
        return Tier.EXCELLENT
    if diff <= GOOD_MAX_DIFF_KMH:
        return Tier.GOOD
    if diff <= FAIR_MAX_DIFF_KMH:
        return Tier.FAIR
    return Tier.POOR


def plan_run(config: RunConfig) -> RunPlan:
    """Return the distance, lap and marker targets for *config*."""
    speed = config.target_speed_kmh
    distance = total_distance(speed, config.duration_min)
    full_laps, remaining = laps_and_remainder(distance, config.track_length_m)
    return RunPlan(
        target_speed_kmh=speed,
        total_distance_m=distance,
        full_laps=full_laps,
        remaining_m=remaining,
        markers=markers_from_remainder(remaining, config.marker_distance_m),
        target_segment_s=config.target_segment_s,
    )


def pace_table(
    track_length_m: float,
    marker_distance_m: float,
    segment_s: float,
    half_lap: bool = False,
) -> list[PaceTableRow]:
    """Return the target passage time at every marker of one observed segment.

    Returns an empty table when any input makes the table meaningless
    (non-positive distances, or a zero/infinite segment time).
    """
    observation = track_length_m / 2 if half_lap else track_length_m
    if observation <= 0 or marker_distance_m <= 0:
        return []
    if segment_s <= 0 or math.isinf(segment_s):
        return []

    speed = observation / segment_s * _MS_TO_KMH
    rows: list[PaceTableRow] = []
    for i in range(math.floor(observation / marker_distance_m) + 1):
        distance = i * marker_distance_m
        rows.append(PaceTableRow(
            marker=i,
            distance_m=distance,
            time_s=distance / observation * segment_s,
            speed_kmh=speed,
        ))
    return rows


def simple_pace_table(segment_s: float, max_laps: int = 20) -> list[tuple[int, float]]:
    """Return ``(lap, cumulative_target_time_s)`` for laps 1..*max_laps*."""
    return [(i, segment_s * i) for i in range(1, max_laps + 1)]


def assess_performance(config: RunConfig, laps: int, markers: int) -> Assessment:
    """Build the :class:`Assessment` of a run that covered *laps* loops plus *markers*.

    The speed is averaged over the configured run duration.
    """
    distance = distance_from_laps_and_markers(
        laps, markers, config.track_length_m, config.marker_distance_m
    )
    speed = observed_speed(distance, config.total_duration_s)
    vma_percent = speed / config.vma_kmh * 100 if config.vma_kmh > 0 else 0.0
    return Assessment(
        actual_distance_m=distance,
        actual_speed_kmh=speed,
        actual_vma_percent=vma_percent,
        deviation_tier=classify_tier(speed, config.target_speed_kmh),
    )


def format_time(seconds: float) -> str:
    """Format *seconds* as ``m:ss.d`` (deciseconds truncated), e.g. ``65.34 → "1:05.3"``."""
    if not math.isfinite(seconds) or seconds <= 0:
        return "0:00.0"
    # The epsilon absorbs float noise such as 2.3 * 10 == 22.999999999999996.
    deciseconds = math.floor(seconds * 10 + 1e-6)
    minutes, rest = divmod(deciseconds, 600)
    return f"{minutes}:{rest // 10:02d}.{rest % 10}"
