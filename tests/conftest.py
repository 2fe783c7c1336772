"""
tests/conftest.py -- Shared test fixtures for the account service tests.

This module provides:
  - make_store(): creates an isolated in-memory UserStore
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - tokens / store / auth_service: unit-level fixtures
  - api_client: TestClient plus a seeded user and its token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process.

JWT_SECRET must be set before any api/ import so get_settings() does not fall
back to the insecure default key.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set before any api/core import so get_settings() sees it.
os.environ.setdefault("JWT_SECRET", "test-secret-key-0123456789-abcdefghij")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService, hash_password

TEST_SECRET = os.environ["JWT_SECRET"]
SEED_PASSWORD = "seedpass123"

_STATE_NAMES = ("user_store", "tokens", "auth_service")


def make_store() -> UserStore:
    """Create a UserStore on a fresh named shared-memory SQLite database."""
    return UserStore(db_url=f"sqlite:///file:test_accounts_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}.{uuid.uuid4().hex[:12]}@email.com"


def _patch_lifespan(user_store: UserStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.tokens = tokens
        app.state.auth_service = AuthService(user_store, tokens)
        yield

    return test_lifespan


def _start_client(user_store: UserStore, tokens: TokenService, **kwargs) -> TestClient:
    app.router.lifespan_context = _patch_lifespan(user_store, tokens)
    return TestClient(app, **kwargs)


# ---------------------------------------------------------------------------
# Unit-level fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = make_store()
    yield s
    s.close()


@pytest.fixture
def auth_service(store: UserStore, tokens: TokenService) -> AuthService:
    return AuthService(store, tokens)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    One TestClient per test module for speed. A seed user is created before
    the client starts and a token is issued for it for Authorization headers.
    Tests that need an exact view of the table should use empty_api_client.
    """
    user_store = make_store()
    tokens = TokenService(TEST_SECRET)
    seed = user_store.create_user("Seed User", unique_email("seed"), hash_password(SEED_PASSWORD))
    token = tokens.issue(seed.id, seed.email)

    with _start_client(user_store, tokens, raise_server_exceptions=True) as client:
        yield client, token, seed.id

    user_store.close()


@pytest.fixture
def empty_api_client() -> Generator[tuple[TestClient, UserStore, TokenService], None, None]:
    """Yield (client, store, tokens) over an empty database, fresh for each test.

    Both clients share the one FastAPI app, so the previous app.state objects
    are put back on teardown; a module-scoped api_client started earlier keeps
    working afterwards.
    """
    previous = {name: getattr(app.state, name, None) for name in _STATE_NAMES}
    user_store = make_store()
    tokens = TokenService(TEST_SECRET)

    with _start_client(user_store, tokens, raise_server_exceptions=True) as client:
        yield client, user_store, tokens

    user_store.close()
    for name, value in previous.items():
        setattr(app.state, name, value)
