"""Print the pace plan and marker table for a track session.

Usage:
  uv run python scripts/pace_plan.py --vma 15 --percent 90 --duration 6
  uv run python scripts/pace_plan.py --track 400 --markers 20 --half-lap
"""

from __future__ import annotations

import argparse

from dotenv import load_dotenv

load_dotenv()

from pace_coach.pace.calculations import (  # noqa: E402
    format_time,
    pace_table,
    plan_run,
    simple_pace_table,
)
from pace_coach.pace.models import RunConfig  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser(description="Track pace plan for a VMA-based run")
    ap.add_argument("--track", type=float, default=200.0, help="Track length in metres")
    ap.add_argument("--vma", type=float, default=12.0, help="Runner VMA in km/h")
    ap.add_argument("--percent", type=float, default=80.0, help="Target %% of VMA")
    ap.add_argument("--duration", type=float, default=3.0, help="Run duration in minutes")
    ap.add_argument("--markers", type=float, default=10.0, help="Distance between markers (m)")
    ap.add_argument("--half-lap", action="store_true", help="Observe every half lap")
    ap.add_argument("--laps", type=int, default=10, help="Rows in the cumulative lap table")
    args = ap.parse_args()

    config = RunConfig(
        track_length_m=args.track,
        vma_kmh=args.vma,
        vma_percent=args.percent,
        duration_min=args.duration,
        marker_distance_m=args.markers,
        observe_half_lap=args.half_lap,
    )
    plan = plan_run(config)
    segment = "half lap" if config.observe_half_lap else "lap"

    print(f"Target speed   : {plan.target_speed_kmh:.1f} km/h")
    print(f"Total distance : {plan.total_distance_m:.0f} m")
    print(f"Full laps      : {plan.full_laps} + {plan.markers} marker(s)")
    print(f"Time per {segment:<6}: {format_time(plan.target_segment_s)}")
    print()

    print("Marker  Distance  Time")
    for row in pace_table(
        config.track_length_m,
        config.marker_distance_m,
        plan.target_segment_s,
        config.observe_half_lap,
    ):
        print(f"{row.marker:>6}  {row.distance_m:>6.0f} m  {format_time(row.time_s)}")
    print()

    print("Lap  Cumulative")
    for lap, cumulative in simple_pace_table(plan.target_segment_s, args.laps):
        print(f"{lap:>3}  {format_time(cumulative)}")


if __name__ == "__main__":
    main()
