"""Run stopwatch, recovery countdown and the ticker that drives them.

Public API
----------
StopwatchEngine - elapsed/remaining time with pause and resume
StopwatchState  - IDLE / RUNNING / PAUSED / STOPPED
TimerState      - readout snapshot of a stopwatch
RecoveryTimer   - one-shot rest countdown with a "get ready" warning
RecoveryType    - rest between repetitions or between series
Ticker          - periodic background callback
"""

from pace_coach.timing.recovery import WARNING_THRESHOLD_S, RecoveryTimer, RecoveryType
from pace_coach.timing.stopwatch import StopwatchEngine, StopwatchState, TimerState
from pace_coach.timing.ticker import Ticker

__all__ = [
    "WARNING_THRESHOLD_S",
    "RecoveryTimer",
    "RecoveryType",
    "StopwatchEngine",
    "StopwatchState",
    "Ticker",
    "TimerState",
]
