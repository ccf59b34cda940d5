"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_container, reset_container
from modules.auth.models import SignupRequest
from modules.auth.passwords import PasswordHasher
from modules.auth.tokens import TokenService
from shared.config import get_settings
from shared.database import reset_client_cache


TEST_ACCESS_SECRET = "test-access-secret-for-testing-only"
TEST_REFRESH_SECRET = "test-refresh-secret-for-testing-only"

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "password123"
TEST_NAME = "Test User"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """
    Point settings at test secrets, cheap hashing and the in-memory store.

    Settings and the service container are rebuilt for every test so each
    test starts with an empty credential store.
    """
    monkeypatch.setenv("JWT_ACCESS_SECRET", TEST_ACCESS_SECRET)
    monkeypatch.setenv("JWT_REFRESH_SECRET", TEST_REFRESH_SECRET)
    monkeypatch.setenv("PASSWORD_HASH_TIME_COST", "1")
    monkeypatch.setenv("PASSWORD_HASH_MEMORY_COST", "1024")
    monkeypatch.setenv("PASSWORD_HASH_PARALLELISM", "1")
    monkeypatch.setenv("USER_STORE", "memory")
    monkeypatch.setenv("DEBUG", "false")
    get_settings.cache_clear()
    reset_container()
    reset_client_cache()
    yield get_settings()
    get_settings.cache_clear()
    reset_container()
    reset_client_cache()


@pytest.fixture
def client() -> TestClient:
    """TestClient for the application, returning 500s instead of raising."""
    from api import app

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Argon2 with minimal cost parameters; production costs make tests slow."""
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def token_service() -> TokenService:
    """The token service the running app verifies with."""
    return get_container().tokens


@pytest.fixture
def signup_payload() -> dict[str, str]:
    return {"email": TEST_EMAIL, "password": TEST_PASSWORD, "name": TEST_NAME}


@pytest.fixture
def registered_session(client, signup_payload) -> dict:
    """Sign up the test user over HTTP and return the ``data`` of the response."""
    response = client.post("/api/auth/signup", json=signup_payload)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def auth_headers(registered_session) -> dict[str, str]:
    """Authorization headers carrying the registered user's access token."""
    return {"Authorization": f"Bearer {registered_session['accessToken']}"}


@pytest.fixture
def signup_request() -> SignupRequest:
    return SignupRequest(email=TEST_EMAIL, password=TEST_PASSWORD, name=TEST_NAME)
