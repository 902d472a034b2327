"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pace_coach.pace.models import Tier


class HealthResponse(BaseModel):
    status: str
    version: str


class RunConfigModel(BaseModel):
    track_length_m: float = Field(gt=0)
    vma_kmh: float = Field(gt=0)
    vma_percent: float = Field(gt=0)
    duration_min: float = Field(gt=0)
    marker_distance_m: float = Field(gt=0)
    observe_half_lap: bool = False


class RunConfigUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    track_length_m: float | None = Field(default=None, gt=0)
    vma_kmh: float | None = Field(default=None, gt=0)
    vma_percent: float | None = Field(default=None, gt=0)
    duration_min: float | None = Field(default=None, gt=0)
    marker_distance_m: float | None = Field(default=None, gt=0)
    observe_half_lap: bool | None = None


class PaceTableRowModel(BaseModel):
    marker: int
    distance_m: float
    time_s: float
    time: str
    speed_kmh: float


class PlanResponse(BaseModel):
    target_speed_kmh: float
    total_distance_m: float
    full_laps: int
    remaining_m: float
    markers: int
    target_segment_s: float
    target_segment: str
    pace_table: list[PaceTableRowModel]


class LapModel(BaseModel):
    lap_number: int
    duration_s: float
    observed_speed_kmh: float
    tier: Tier
    color: str
    cumulative_elapsed_s: float


class StatsModel(BaseModel):
    count: int
    min_speed_kmh: float
    avg_speed_kmh: float
    max_speed_kmh: float
    tier_counts: dict[str, int]


class RunStateResponse(BaseModel):
    elapsed_s: float
    remaining_s: float
    elapsed: str
    remaining: str
    is_running: bool
    is_paused: bool
    finished: bool
    target_speed_kmh: float
    target_segment_s: float
    current_tier: Tier | None
    current_color: str
    segment_elapsed_s: float
    progress_percent: float
    pace_status: str
    laps: list[LapModel]
    stats: StatsModel | None = None


class ControlResponse(BaseModel):
    applied: bool
    run: RunStateResponse


class SeriesCreateRequest(BaseModel):
    total_series: int
    reps_per_series: int
    recovery_between_reps_s: float = Field(default=0.0, ge=0)
    recovery_between_series_s: float = Field(default=0.0, ge=0)


class AssessmentModel(BaseModel):
    actual_distance_m: float = Field(ge=0)
    actual_speed_kmh: float = Field(ge=0)
    actual_vma_percent: float = Field(ge=0)
    deviation_tier: Tier


class ValidateRequest(BaseModel):
    """Either an explicit ``assessment`` or the ``laps``/``markers`` covered."""

    assessment: AssessmentModel | None = None
    laps: int | None = Field(default=None, ge=0)
    markers: int = Field(default=0, ge=0)


class PerformanceRecordModel(BaseModel):
    series: int
    rep: int
    actual_distance_m: float
    actual_speed_kmh: float
    actual_vma_percent: float
    deviation_tier: Tier


class ValidateResponse(BaseModel):
    completed: bool
    record: PerformanceRecordModel
    recovery_type: str | None = None
    recovery_s: float = 0.0
    next_series: int | None = None
    next_rep: int | None = None


class SeriesResponse(BaseModel):
    state: str
    total_series: int | None = None
    reps_per_series: int | None = None
    recovery_between_reps_s: float | None = None
    recovery_between_series_s: float | None = None
    series: int | None = None
    rep: int | None = None
    next_series: int | None = None
    next_rep: int | None = None
    is_complete: bool = False
    history: list[PerformanceRecordModel] = Field(default_factory=list)
    stats: StatsModel | None = None


class RecoveryResponse(BaseModel):
    active: bool
    recovery_type: str | None = None
    duration_s: float = 0.0
    remaining_s: float = 0.0
    remaining: str = "0:00.0"
    progress_percent: float = 0.0
    in_warning: bool = False
    next_series: int | None = None
    next_rep: int | None = None
