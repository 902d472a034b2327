"""Pace arithmetic and pace data models."""

from pace_coach.pace.calculations import (
    assess_performance,
    classify_tier,
    distance_from_laps_and_markers,
    format_time,
    laps_and_remainder,
    markers_from_remainder,
    observed_speed,
    pace_table,
    plan_run,
    segment_time,
    simple_pace_table,
    target_speed,
    total_distance,
)
from pace_coach.pace.models import (
    Assessment,
    Lap,
    PaceStatus,
    PaceTableRow,
    RunConfig,
    RunPlan,
    SegmentProgress,
    Tier,
)

__all__ = [
    "Assessment",
    "Lap",
    "PaceStatus",
    "PaceTableRow",
    "RunConfig",
    "RunPlan",
    "SegmentProgress",
    "Tier",
    "assess_performance",
    "classify_tier",
    "distance_from_laps_and_markers",
    "format_time",
    "laps_and_remainder",
    "markers_from_remainder",
    "observed_speed",
    "pace_table",
    "plan_run",
    "segment_time",
    "simple_pace_table",
    "target_speed",
    "total_distance",
]
