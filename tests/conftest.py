"""
tests/conftest.py -- Shared test fixtures for the Caprio API tests.

This module provides:
  - engine / user_store / catalog_store / tokens: isolated per-test objects
    for unit tests of the stores and the token service
  - _patch_lifespan(): wires test objects into app.state, bypassing real startup
  - api_client: TestClient plus an admin token and a customer token

Design: Named shared-memory SQLite URIs (not plain :memory:) are used for the
TestClient fixtures because route handlers run in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format shares one in-memory instance across all
connections in the same process.

The DEBUG env var must be set before any app import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from typing import NamedTuple

# CRITICAL: Set DEBUG before any core/api import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.limiter import limiter
from api.main import app
from auth.credentials import register_user
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService, hash_password
from catalog.store import CatalogStore
from core.db import create_db_engine

TEST_SECRET = "caprio-test-secret-key-0123456789abcdef"

ADMIN_EMAIL = "testadmin@caprio.com"
ADMIN_PASSWORD = "testpass123"
CUSTOMER_EMAIL = "customer@caprio.com"
CUSTOMER_PASSWORD = "custpass123"

# Request counts across a test session would trip the 120/minute default
# limit, which is advisory and not under test here.
limiter.enabled = False


class ApiClient(NamedTuple):
    client: TestClient
    admin_token: str
    user_token: str
    user_id: int


# ---------------------------------------------------------------------------
# Unit-test fixtures
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
def catalog_store(engine: Engine) -> CatalogStore:
    return CatalogStore(engine)


@pytest.fixture
def token_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def tokens(token_secret: str) -> TokenService:
    return TokenService(token_secret, 3600)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(engine: Engine, user_store: UserStore, catalog: CatalogStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test objects into app.state so TestClient routes see
    isolated test DBs and a known signing key rather than the real ones.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.catalog = catalog
        app.state.tokens = tokens
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request: pytest.FixtureRequest) -> Generator[ApiClient, None, None]:
    """Yield an ApiClient for integration tests.

    Each test module gets its own shared-memory database (named after the
    module) holding one admin and one customer account.
    """
    db_name = request.module.__name__.replace(".", "_")
    engine = create_db_engine(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")
    user_store = UserStore(engine)
    catalog = CatalogStore(engine)
    tokens = TokenService(TEST_SECRET, 3600)

    admin_id = user_store.create_user(
        User(email=ADMIN_EMAIL, name="Admin", hashed_password=hash_password(ADMIN_PASSWORD), is_admin=True)
    )
    customer = register_user(user_store, "Customer", CUSTOMER_EMAIL, CUSTOMER_PASSWORD)

    admin_token = tokens.create_access_token(admin_id, ADMIN_EMAIL, True)
    user_token = tokens.create_access_token(customer.id, customer.email, False)

    app.router.lifespan_context = _patch_lifespan(engine, user_store, catalog, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiClient(client, admin_token, user_token, customer.id)

    engine.dispose()
