"""/health endpoint."""

from __future__ import annotations


def test_health_status_200(client):
    resp = client.get("/health")
    assert resp.status_code == 200


def test_health_body(client):
    resp = client.get("/health")
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


def test_logging_configured_at_startup_not_import(session):
    from unittest.mock import patch

    from fastapi.testclient import TestClient

    from pace_coach.web.app import app

    previous = app.state.session
    app.state.session = session
    try:
        with patch("pace_coach.web.app.logging.basicConfig") as basic_config:
            basic_config.assert_not_called()
            with TestClient(app):
                basic_config.assert_called_once()
    finally:
        app.state.session = previous
