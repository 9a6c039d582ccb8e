"""
tests/conftest.py -- Shared test fixtures for Postboard tests.

This module provides:
  - engine / user_store / post_store: fresh in-memory SQLite per test
  - hasher / tokens: fast bcrypt (4 rounds) and a fixed-key TokenIssuer
  - _patch_lifespan(): wires test collaborators into app.state, bypassing real startup
  - api_client: TestClient plus a registered user's token and id

Design: the API fixture uses a named shared-memory SQLite URI (not plain
:memory:) because TestClient runs sync code in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

The environment must be set before any api/ or core/ import: DEBUG so
get_settings() auto-generates SECRET_KEY instead of raising, ALLOWED_HOSTS so
TrustedHostMiddleware accepts TestClient's "testserver" host, and a
REGISTER_RATE_LIMIT high enough for one module of registration tests but low
enough for tests/test_rate_limit.py to exhaust quickly. The api_client fixture
resets the limiter counters per module.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any core/ or api/ import (Settings is read at import time).
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')
os.environ.setdefault("REGISTER_RATE_LIMIT", "50/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.limiter import limiter
from api.main import app
from auth.dependencies import AuthGate
from auth.models import User
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.db import create_db_engine
from posts.store import PostStore

TEST_SECRET = "test-secret-key-0123456789abcdef0123456789abcdef"

# ---------------------------------------------------------------------------
# Unit-level fixtures -- one fresh database per test
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    eng = create_db_engine("sqlite:///:memory:")
    yield eng
    eng.dispose()


@pytest.fixture
def user_store(engine: Engine) -> UserStore:
    return UserStore(engine)


@pytest.fixture
def post_store(engine: Engine, user_store: UserStore) -> PostStore:
    return PostStore(engine)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Minimum bcrypt cost -- the algorithm is the same, only faster."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def signing_key() -> str:
    return TEST_SECRET


@pytest.fixture
def tokens(signing_key: str) -> TokenIssuer:
    return TokenIssuer(signing_key)


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(engine: Engine, user_store: UserStore, post_store: PostStore, tokens: TokenIssuer):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test collaborators into app.state so TestClient routes
    see isolated test DBs and a known signing key.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.post_store = post_store
        app.state.hasher = PasswordHasher(rounds=4)
        app.state.tokens = tokens
        app.state.auth_gate = AuthGate(tokens)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The database is named after the test module so modules never share rows.
    A user "Author <author@example.com>" is created before the client starts
    and a token is issued for it.
    """
    db_name = request.module.__name__.rsplit(".", 1)[-1]
    eng = create_db_engine(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")
    users = UserStore(eng)
    posts = PostStore(eng)
    tokens = TokenIssuer(TEST_SECRET)

    author = users.insert(
        User(name="Author", email="author@example.com", hashed_password=PasswordHasher(rounds=4).hash("authorpass"))
    )
    token = tokens.issue(author.id)

    app.router.lifespan_context = _patch_lifespan(eng, users, posts, tokens)
    limiter.reset()

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, author.id

    eng.dispose()
