"""FastAPI Web application — JSON controls and readouts for the pitch-side UI."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request

from pace_coach.config import Settings
from pace_coach.pace.calculations import format_time
from pace_coach.pace.models import Assessment
from pace_coach.series.models import PerformanceRecord, SeriesState
from pace_coach.session import CoachSession
from pace_coach.tracking.stats import SpeedStats
from pace_coach.web.schemas import (
    ControlResponse,
    HealthResponse,
    PaceTableRowModel,
    PlanResponse,
    RecoveryResponse,
    RunConfigModel,
    RunConfigUpdate,
    RunStateResponse,
    SeriesCreateRequest,
    SeriesResponse,
    ValidateRequest,
    ValidateResponse,
)

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

_settings = Settings.from_env()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    logging.basicConfig(
        level=_settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    yield
    app.state.session.close()


app = FastAPI(title="Track Pace Coach", version=_VERSION, lifespan=_lifespan)
app.state.session = CoachSession.from_settings(_settings)


def _session(request: Request) -> CoachSession:
    return request.app.state.session


def _stats(stats: SpeedStats | None) -> dict | None:
    return stats.to_dict() if stats is not None else None


def _run_state(session: CoachSession) -> RunStateResponse:
    data = session.snapshot()
    data["stats"] = _stats(session.lap_stats())
    return RunStateResponse(**data)


def _records(records: list[PerformanceRecord]) -> list[dict]:
    return [r.to_dict() for r in records]


# ---------------------------------------------------------------------------
# Configuration endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=_VERSION)


@app.get("/api/config", response_model=RunConfigModel)
def get_config(request: Request) -> RunConfigModel:
    cfg = _session(request).config
    return RunConfigModel(
        track_length_m=cfg.track_length_m,
        vma_kmh=cfg.vma_kmh,
        vma_percent=cfg.vma_percent,
        duration_min=cfg.duration_min,
        marker_distance_m=cfg.marker_distance_m,
        observe_half_lap=cfg.observe_half_lap,
    )


@app.put("/api/config", response_model=RunConfigModel)
def update_config(request: Request, update: RunConfigUpdate) -> RunConfigModel:
    """Change run parameters; refused while a run is in progress or resting."""
    changes = update.model_dump(exclude_none=True)
    if not _session(request).configure(**changes):
        raise HTTPException(status_code=409, detail="Cannot change parameters during a run")
    return get_config(request)


@app.get("/api/plan", response_model=PlanResponse)
def get_plan(request: Request) -> PlanResponse:
    """Distance/lap/marker targets and the per-marker pace table."""
    session = _session(request)
    plan = session.plan()
    rows = [
        PaceTableRowModel(
            marker=r.marker,
            distance_m=r.distance_m,
            time_s=r.time_s,
            time=format_time(r.time_s),
            speed_kmh=r.speed_kmh,
        )
        for r in session.pace_table()
    ]
    return PlanResponse(
        target_speed_kmh=plan.target_speed_kmh,
        total_distance_m=plan.total_distance_m,
        full_laps=plan.full_laps,
        remaining_m=plan.remaining_m,
        markers=plan.markers,
        target_segment_s=plan.target_segment_s,
        target_segment=format_time(plan.target_segment_s),
        pace_table=rows,
    )


@app.post("/api/reset", response_model=RunStateResponse)
def reset_all(request: Request) -> RunStateResponse:
    session = _session(request)
    session.reset_all()
    return _run_state(session)


# ---------------------------------------------------------------------------
# Run control endpoints
# ---------------------------------------------------------------------------


@app.get("/api/run", response_model=RunStateResponse)
def get_run(request: Request) -> RunStateResponse:
    return _run_state(_session(request))


@app.post("/api/run/start", response_model=ControlResponse)
def start_run(request: Request) -> ControlResponse:
    session = _session(request)
    applied = session.start()
    return ControlResponse(applied=applied, run=_run_state(session))


@app.post("/api/run/pause", response_model=ControlResponse)
def pause_or_resume_run(request: Request) -> ControlResponse:
    session = _session(request)
    applied = session.pause_or_resume()
    return ControlResponse(applied=applied, run=_run_state(session))


@app.post("/api/run/stop", response_model=ControlResponse)
def stop_run(request: Request) -> ControlResponse:
    session = _session(request)
    session.stop_and_reset()
    return ControlResponse(applied=True, run=_run_state(session))


@app.post("/api/run/mark", response_model=ControlResponse)
def mark_lap(request: Request) -> ControlResponse:
    session = _session(request)
    lap = session.mark()
    return ControlResponse(applied=lap is not None, run=_run_state(session))


@app.post("/api/run/undo", response_model=ControlResponse)
def undo_lap(request: Request) -> ControlResponse:
    session = _session(request)
    lap = session.undo_last()
    return ControlResponse(applied=lap is not None, run=_run_state(session))


# ---------------------------------------------------------------------------
# Series and recovery endpoints
# ---------------------------------------------------------------------------


def _series_state(session: CoachSession) -> SeriesResponse:
    series = session.series
    cfg = series.config
    progress = series.progress
    staged = series.staged_progress
    return SeriesResponse(
        state=series.state.value,
        total_series=cfg.total_series if cfg else None,
        reps_per_series=cfg.reps_per_series if cfg else None,
        recovery_between_reps_s=cfg.recovery_between_reps_s if cfg else None,
        recovery_between_series_s=cfg.recovery_between_series_s if cfg else None,
        series=progress.series if progress else None,
        rep=progress.rep if progress else None,
        next_series=staged.series if staged else None,
        next_rep=staged.rep if staged else None,
        is_complete=series.is_complete(),
        history=_records(session.performance_history()),
        stats=_stats(session.performance_stats()),
    )


@app.get("/api/series", response_model=SeriesResponse)
def get_series(request: Request) -> SeriesResponse:
    return _series_state(_session(request))


@app.post("/api/series", response_model=SeriesResponse)
def create_series(request: Request, req: SeriesCreateRequest) -> SeriesResponse:
    session = _session(request)
    try:
        session.create_series(
            req.total_series,
            req.reps_per_series,
            req.recovery_between_reps_s,
            req.recovery_between_series_s,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _series_state(session)


@app.delete("/api/series", response_model=SeriesResponse)
def cancel_series(request: Request) -> SeriesResponse:
    session = _session(request)
    session.cancel_series()
    return _series_state(session)


@app.post("/api/series/validate", response_model=ValidateResponse)
def validate_performance(request: Request, req: ValidateRequest) -> ValidateResponse:
    """Record the current run's performance and start the following recovery."""
    session = _session(request)
    if session.series.state is not SeriesState.ACTIVE:
        raise HTTPException(status_code=409, detail="No series run awaiting validation")
    if req.assessment is None and req.laps is None:
        raise HTTPException(status_code=422, detail="Provide an assessment or laps/markers")

    assessment = None
    if req.assessment is not None:
        assessment = Assessment(**req.assessment.model_dump())
    outcome = session.validate_performance(assessment, laps=req.laps, markers=req.markers)
    if outcome is None:
        raise HTTPException(status_code=409, detail="No series run awaiting validation")

    return ValidateResponse(
        completed=outcome.completed,
        record=outcome.record.to_dict(),
        recovery_type=outcome.recovery_type.value if outcome.recovery_type else None,
        recovery_s=outcome.recovery_s,
        next_series=outcome.next_progress.series if outcome.next_progress else None,
        next_rep=outcome.next_progress.rep if outcome.next_progress else None,
    )


def _recovery_state(session: CoachSession) -> RecoveryResponse:
    series = session.series
    timer = series.recovery
    if timer is None:
        return RecoveryResponse(active=False)
    staged = series.staged_progress
    return RecoveryResponse(
        active=not timer.finished,
        recovery_type=timer.recovery_type.value,
        duration_s=timer.duration_s,
        remaining_s=timer.remaining_s,
        remaining=format_time(timer.remaining_s),
        progress_percent=timer.progress_percent,
        in_warning=timer.in_warning,
        next_series=staged.series if staged else None,
        next_rep=staged.rep if staged else None,
    )


@app.get("/api/recovery", response_model=RecoveryResponse)
def get_recovery(request: Request) -> RecoveryResponse:
    return _recovery_state(_session(request))


@app.post("/api/recovery/skip", response_model=RecoveryResponse)
def skip_recovery(request: Request) -> RecoveryResponse:
    session = _session(request)
    if not session.skip_recovery():
        raise HTTPException(status_code=409, detail="No recovery in progress")
    return _recovery_state(session)
