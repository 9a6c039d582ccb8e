"""
tests/test_rate_limit.py -- POST /api/users is rate-limited per client IP.

Kept in its own module: it exhausts the limiter, and the api_client fixture
only resets counters when a new module starts.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.limiter import REGISTER_LIMIT


def test_registration_is_throttled(api_client: tuple[TestClient, str, int]) -> None:
    """Empty bodies are cheap (422, no bcrypt) but still count against the limit."""
    client, _token, _uid = api_client
    allowed = int(REGISTER_LIMIT.split("/")[0])

    statuses = [client.post("/api/users", json={}).status_code for _ in range(allowed)]
    assert set(statuses) == {422}

    resp = client.post("/api/users", json={})
    assert resp.status_code == 429
    assert resp.json()["error"]["code"] == "rate_limited"
    assert "retry-after" in resp.headers


def test_other_routes_not_throttled(api_client: tuple[TestClient, str, int]) -> None:
    client, token, _uid = api_client
    resp = client.post("/api/posts", json={"title": "t", "body": "b"}, headers={"x-auth-token": token})
    assert resp.status_code == 200


def test_throttled_response_carries_cors_headers(api_client: tuple[TestClient, str, int]) -> None:
    """Runs after the limit is exhausted; browsers must still be able to read the 429."""
    client, _token, _uid = api_client
    resp = client.post("/api/users", json={}, headers={"Origin": "http://localhost:5000"})
    assert resp.status_code == 429
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5000"
