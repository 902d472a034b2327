"""Pitch-side console timer — one keystroke + Enter per action.

Commands:
  <Enter>  mark a passage        u  undo last passage
  s        start                 p  pause / resume
  x        stop and reset        q  quit

Usage:
  uv run python scripts/live_coach.py --vma 14 --percent 85 --duration 4
  uv run python scripts/live_coach.py --no-audio
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

load_dotenv()

from pace_coach.config import Settings  # noqa: E402
from pace_coach.feedback.notifier import BeepNotifier, NullNotifier  # noqa: E402
from pace_coach.pace.calculations import format_time  # noqa: E402
from pace_coach.pace.models import RunConfig  # noqa: E402
from pace_coach.session import CoachSession  # noqa: E402


def _print_state(session: CoachSession) -> None:
    s = session.snapshot()
    state = "paused" if s["is_paused"] else "running" if s["is_running"] else "idle"
    print(
        f"  [{state}] {s['elapsed']} elapsed / {s['remaining']} left"
        f"  segment {s['progress_percent']:.0f}% ({s['pace_status']})",
        flush=True,
    )


def main() -> None:
    ap = argparse.ArgumentParser(description="Track pace coach — console timer")
    ap.add_argument("--track", type=float, default=200.0, help="Track length in metres")
    ap.add_argument("--vma", type=float, default=12.0, help="Runner VMA in km/h")
    ap.add_argument("--percent", type=float, default=80.0, help="Target %% of VMA")
    ap.add_argument("--duration", type=float, default=3.0, help="Run duration in minutes")
    ap.add_argument("--half-lap", action="store_true", help="Mark every half lap")
    ap.add_argument("--no-audio", action="store_true", help="Disable beeps")
    args = ap.parse_args()

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    config = RunConfig(
        track_length_m=args.track,
        vma_kmh=args.vma,
        vma_percent=args.percent,
        duration_min=args.duration,
        observe_half_lap=args.half_lap,
    )
    notifier = NullNotifier() if args.no_audio else BeepNotifier()
    session = CoachSession(
        config,
        notifier=notifier,
        tick_hz=settings.tick_hz,
        recovery_tick_s=settings.recovery_tick_s,
    )

    print(f"Target {config.target_speed_kmh:.1f} km/h, "
          f"{format_time(config.target_segment_s)} per segment.")
    print("s=start  <Enter>=mark  u=undo  p=pause  x=stop  q=quit")

    try:
        while True:
            cmd = input().strip().lower()
            if cmd == "q":
                break
            if cmd == "s":
                session.start()
            elif cmd == "p":
                session.pause_or_resume()
            elif cmd == "x":
                session.stop_and_reset()
            elif cmd == "u":
                lap = session.undo_last()
                if lap is not None:
                    print(f"  undone #{lap.lap_number}")
            elif cmd == "":
                lap = session.mark()
                if lap is not None:
                    print(
                        f"  #{lap.lap_number} {format_time(lap.duration_s)} "
                        f"{lap.observed_speed_kmh:.1f} km/h [{lap.tier.color}]"
                    )
            _print_state(session)
    except (KeyboardInterrupt, EOFError):
        pass
    finally:
        session.close()
        stats = session.lap_stats()
        if stats is not None:
            print(
                f"\n{stats.count} passages — avg {stats.avg_speed_kmh:.1f} km/h "
                f"(min {stats.min_speed_kmh:.1f} / max {stats.max_speed_kmh:.1f})"
            )


if __name__ == "__main__":
    main()
