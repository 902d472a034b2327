"""Optional tactile/audio feedback port."""

from pace_coach.feedback.notifier import (
    BeepNotifier,
    FeedbackConfig,
    FeedbackEvent,
    FeedbackKind,
    NullNotifier,
    make_notifier,
    safe_notify,
)

__all__ = [
    "BeepNotifier",
    "FeedbackConfig",
    "FeedbackEvent",
    "FeedbackKind",
    "NullNotifier",
    "make_notifier",
    "safe_notify",
]
