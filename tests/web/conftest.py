"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pace_coach.feedback.notifier import NullNotifier
from pace_coach.session import CoachSession
from pace_coach.web.app import app


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, t: float = 500.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(clock) -> CoachSession:
    """Session with background ticking disabled, driven by *clock*."""
    return CoachSession(notifier=NullNotifier(), tick_hz=0, _time_fn=clock)


@pytest.fixture
def client(session):
    """FastAPI test client bound to the fake-clock session."""
    previous = app.state.session
    app.state.session = session
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.state.session = previous
