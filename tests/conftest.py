"""
tests/conftest.py -- Shared test fixtures for DishDelight tests.

This module provides:
  - engine / user_store / favorite_store: fresh in-memory stores per test
  - token_service: TokenService with a fixed test key
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a registered user's token for integration tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
api_client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process.

Environment must be set before any app import:
  DEBUG=true               -- get_settings() auto-generates SECRET_KEY
  BCRYPT_ROUNDS=4          -- bcrypt's minimum cost keeps the suite fast
  RATE_LIMIT_ENABLED=false -- login tests call /login many times per minute
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any auth/core import -- settings are read at import time.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import TokenService
from core.db import create_db_engine
from favorites.store import FavoriteStore

TEST_SECRET = "test-secret-key-0123456789abcdef0123456789abcdef"

API_USER_EMAIL = "apiuser@example.com"
API_USER_PASSWORD = "ApiPass1!"

# ---------------------------------------------------------------------------
# Unit-level fixtures -- one fresh in-memory DB per test
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
def favorite_store(engine: Engine) -> FavoriteStore:
    return FavoriteStore(engine)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_SECRET)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(engine: Engine, user_store: UserStore, favorite_store: FavoriteStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores into app.state so TestClient routes see
    isolated test DBs rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.favorite_store = favorite_store
        app.state.token_service = tokens
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request: pytest.FixtureRequest) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers but use an isolated in-memory store.
    A user (API_USER_EMAIL / API_USER_PASSWORD) is created before the client
    starts and a token is issued for use in Authorization headers.
    """
    # One named DB per test module so modules never see each other's rows.
    db_name = request.module.__name__.rsplit(".", 1)[-1]
    eng = create_db_engine(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")
    user_store = UserStore(eng)
    favorite_store = FavoriteStore(eng)
    tokens = TokenService(TEST_SECRET)

    user = user_store.insert_user("apiuser", API_USER_EMAIL, hash_password(API_USER_PASSWORD))
    token = tokens.issue(user.id)

    app.router.lifespan_context = _patch_lifespan(eng, user_store, favorite_store, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, user.id

    eng.dispose()
