"""
tests/test_api_users.py -- Integration tests for POST /api/users and GET /.

These run through the full ASGI stack (middleware, routing, flow, store,
exception handlers) using the api_client fixture.

Coverage:
  - GET / returns the plain-text greeting
  - Registration happy path: 200 {"token"}, token decodes to the new user id
  - No password or hash anywhere in the response; Cache-Control: no-store
  - 422 with one message per violated rule, in field order
  - Malformed / non-object JSON bodies are treated as empty
  - Duplicate email -> 400 "User already exists", exactly one record
  - Store failure -> 500 "Server error" with no internal detail
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.errors import StoreError

NAME_MSG = "Please enter your name"
EMAIL_MSG = "Please enter a valid email"
PASSWORD_MSG = "Please enter a password with 6 or more characters"


def _messages(resp) -> list[str]:
    return [e["message"] for e in resp.json()["error"]["errors"]]


class TestRoot:
    def test_root_plain_text(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "http get request sent to root api endpoint"


class TestRegisterSuccess:
    def test_returns_token_for_new_user(self, api_client: tuple[TestClient, str, int]) -> None:
        """The token must verify to the id of the record that was just created."""
        client, _token, _uid = api_client
        resp = client.post(
            "/api/users",
            json={"name": "Grace Hopper", "email": "grace@example.com", "password": "cobol1959"},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert set(body) == {"token"}

        state = client.app.state
        user = state.user_store.find_by_email("grace@example.com")
        assert user is not None
        assert state.tokens.verify(body["token"]) == user.id

    def test_response_never_contains_password_or_hash(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = client.post(
            "/api/users",
            json={"name": "Alan Turing", "email": "alan@example.com", "password": "enigma-1940"},
        )
        assert resp.status_code == 200
        stored = client.app.state.user_store.find_by_email("alan@example.com")
        assert "enigma-1940" not in resp.text
        assert stored.hashed_password not in resp.text
        assert resp.headers["cache-control"] == "no-store"

    def test_long_password_accepted(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        passphrase = "the quick brown fox jumps over the lazy dog and keeps on running further"
        assert len(passphrase.encode("utf-8")) > 72
        resp = client.post(
            "/api/users",
            json={"name": "Donald Knuth", "email": "knuth@example.com", "password": passphrase},
        )
        assert resp.status_code == 200, resp.text
        stored = client.app.state.user_store.find_by_email("knuth@example.com")
        assert client.app.state.hasher.verify(passphrase, stored.hashed_password)

    def test_issued_token_authenticates_post_creation(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        token = client.post(
            "/api/users",
            json={"name": "Barbara Liskov", "email": "barbara@example.com", "password": "substitution"},
        ).json()["token"]
        resp = client.post("/api/posts", json={"title": "LSP", "body": "Subtypes."}, headers={"x-auth-token": token})
        assert resp.status_code == 200
        user = client.app.state.user_store.find_by_email("barbara@example.com")
        assert resp.json()["user"] == user.id


class TestRegisterValidation:
    def test_all_violations_reported(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = client.post("/api/users", json={"name": "", "email": "nope", "password": "123"})
        assert resp.status_code == 422
        error = resp.json()["error"]
        assert error["code"] == "validation_error"
        assert [e["field"] for e in error["errors"]] == ["name", "email", "password"]
        assert _messages(resp) == [NAME_MSG, EMAIL_MSG, PASSWORD_MSG]

    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"email": "a@example.com", "password": "123456"}, [NAME_MSG]),
            ({"name": "A", "email": "bad", "password": "123456"}, [EMAIL_MSG]),
            ({"name": "A", "email": "a@example.com", "password": "12345"}, [PASSWORD_MSG]),
        ],
    )
    def test_single_violation(self, api_client: tuple[TestClient, str, int], body: dict, expected: list) -> None:
        client, _token, _uid = api_client
        resp = client.post("/api/users", json=body)
        assert resp.status_code == 422
        assert _messages(resp) == expected

    @pytest.mark.parametrize("raw", [b"{not json", b"[1, 2, 3]", b""])
    def test_unparseable_body_reports_every_field(self, api_client: tuple[TestClient, str, int], raw: bytes) -> None:
        client, _token, _uid = api_client
        resp = client.post("/api/users", content=raw, headers={"Content-Type": "application/json"})
        assert resp.status_code == 422
        assert _messages(resp) == [NAME_MSG, EMAIL_MSG, PASSWORD_MSG]


class TestRegisterDuplicate:
    def test_second_registration_rejected(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        body = {"name": "Linus", "email": "linus@example.com", "password": "penguin!"}
        assert client.post("/api/users", json=body).status_code == 200

        resp = client.post("/api/users", json={**body, "name": "Not Linus"})
        assert resp.status_code == 400
        assert resp.json() == {"error": {"code": "conflict", "message": "User already exists"}}
        assert client.app.state.user_store.count_by_email("linus@example.com") == 1

    def test_existing_fixture_user_conflicts(self, api_client: tuple[TestClient, str, int]) -> None:
        client, _token, _uid = api_client
        resp = client.post(
            "/api/users",
            json={"name": "Imposter", "email": "AUTHOR@example.com", "password": "whatever1"},
        )
        assert resp.status_code == 400


class TestRegisterServerError:
    def test_store_failure_is_generic_500(self, api_client: tuple[TestClient, str, int], monkeypatch) -> None:
        client, _token, _uid = api_client

        def _boom(user):
            raise StoreError("sqlite3.OperationalError: database is locked")

        monkeypatch.setattr(client.app.state.user_store, "insert", _boom)
        resp = client.post(
            "/api/users",
            json={"name": "Unlucky", "email": "unlucky@example.com", "password": "password1"},
        )
        assert resp.status_code == 500
        assert resp.json() == {"error": {"code": "internal_error", "message": "Server error"}}
        assert "locked" not in resp.text
