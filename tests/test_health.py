"""
tests/test_health.py -- Integration tests for GET /api/health.

Covers:
  - 200 response with status, version, and components fields
  - components.database reports 'ok' when the store answers, 'error' when it raises
  - No authentication required
"""

from __future__ import annotations

from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _token, _ = api_client
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"]["app"] == "ok"
    assert data["components"]["database"] == "ok"


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    client, _, _ = api_client
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200


def test_health_reports_database_error(empty_api_client):
    """A store that cannot be reached is reported, not raised."""
    client, _store, _tokens = empty_api_client
    broken = MagicMock()
    broken.ping.side_effect = OperationalError("SELECT 1", {}, Exception("unable to open database file"))
    client.app.state.user_store = broken

    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["components"]["database"] == "error"
