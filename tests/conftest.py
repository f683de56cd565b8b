"""
Pytest fixtures for the peptide admin API.

Provides:
- client: FastAPI TestClient (lifespan not entered, so no DB pool)
- as_admin: bypasses the admin gate via dependency override
- fake_transaction: replaces core.db.transaction with a no-op context
- session_token: builds shared-secret session JWTs
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Any, Generator

import jwt
import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from auth import security
from core import db

TEST_JWT_SECRET = "test-secret-for-session-tokens-0123456789"
ADMIN_PROFILE = {
    "id": "6f1c1f9e-3f5e-4a55-9d0b-6b0f3a1d2c11",
    "clerk_user_id": "user_admin",
    "email": "admin@example.com",
    "role": "admin",
    "created_at": None,
}


@pytest.fixture(autouse=True)
def auth_env(monkeypatch):
    monkeypatch.setenv("AUTH_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("AUTH_JWT_ALG", "HS256")
    for name in ("AUTH_JWKS_URL", "AUTH_JWKS_MIN_REFETCH_SECONDS", "AUTH_JWT_ISSUER", "AUTH_AUTHORIZED_PARTIES"):
        monkeypatch.delenv(name, raising=False)
    security.clear_jwks_cache()
    yield
    security.clear_jwks_cache()


@pytest.fixture(scope="session")
def app():
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_admin(app):
    app.dependency_overrides[auth_dependencies.require_admin] = lambda: dict(ADMIN_PROFILE)
    yield ADMIN_PROFILE
    app.dependency_overrides.pop(auth_dependencies.require_admin, None)


@pytest.fixture
def fake_transaction(monkeypatch):
    conn = object()

    @asynccontextmanager
    async def _transaction():
        yield conn

    monkeypatch.setattr(db, "transaction", _transaction)
    return conn


def make_session_token(sub: str | None = "user_1", *, ttl_s: int = 300, **claims: Any) -> str:
    payload: dict[str, Any] = {"exp": int(time.time()) + ttl_s, "iat": int(time.time())}
    if sub is not None:
        payload["sub"] = sub
    payload.update(claims)
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def session_token():
    return make_session_token
