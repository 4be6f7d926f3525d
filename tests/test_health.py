"""
tests/test_health.py -- Integration tests for the public status endpoints.

Covers:
  - GET /api/v1/health: 200 with status, version, and components fields
  - components.database reports 'ok' against the test store
  - GET /: welcome message
  - Neither endpoint requires authentication
"""

from __future__ import annotations


def test_health_returns_200_with_components(api_client):
    """Health endpoint returns 200 with status, version, and components."""
    client, _, _ = api_client
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"]["app"] == "ok"
    assert data["components"]["database"] == "ok"


def test_root_welcome(api_client):
    client, _, _ = api_client
    resp = client.get("/", headers={})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Welcome to DishDelight!"}


def test_unknown_route_uses_error_body(api_client):
    client, _, _ = api_client
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert "message" in resp.json()
