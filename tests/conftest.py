"""Shared pytest fixtures for test suite"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from calmtype.core.config import Settings
from calmtype.db.adapters import SQLiteAdapter, create_adapter
from calmtype.db.base import Base
from calmtype.main import create_app
from calmtype.services.correction import AutoCorrector

TEST_JWT_SECRET = "test-jwt-secret"
TEST_PASSWORD = "calm-password"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Development settings on a throwaway SQLite file, fast bcrypt, no rate limit."""
    return Settings(
        _env_file=None,
        node_env="test",
        sqlite_path=str(tmp_path / "calm.sqlite"),
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        rate_limit_enabled=False,
        deepseek_api_key=None,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    # local dictionary only; no network in tests
    return create_app(settings, corrector=AutoCorrector())


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """FastAPI test client; entering it runs startup (schema creation)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def db(settings) -> SQLiteAdapter:
    adapter = create_adapter(settings)
    await adapter.init_schema(Base.metadata)
    try:
        yield adapter
    finally:
        await adapter.close()


def register(client: TestClient, username: str = "calmuser", email: str = "calm@example.com", password: str = TEST_PASSWORD):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


@pytest.fixture
def auth_headers(client) -> dict:
    """Bearer header for a freshly registered user."""
    response = register(client)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def guest_headers(client) -> dict:
    response = client.post("/api/auth/guest")
    assert response.status_code == 200, response.text
    return {"x-guest-id": response.json()["guestId"]}
