"""Registration, login, guest sessions and the token gate"""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi import status
from jose import jwt

from calmtype.core.security import TokenClaims, create_access_token, decode_access_token
from tests.conftest import TEST_JWT_SECRET, TEST_PASSWORD, register


class TestRegister:
    """POST /api/auth/register"""

    def test_register_returns_token_and_user(self, client):
        response = register(client)
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["username"] == "calmuser"
        assert body["user"]["email"] == "calm@example.com"

        payload = jwt.decode(body["token"], TEST_JWT_SECRET, algorithms=["HS256"])
        assert payload["userId"] == body["user"]["id"]
        assert payload["username"] == "calmuser"
        assert payload["exp"] - payload["iat"] == 24 * 3600

    def test_duplicate_username_is_conflict(self, client):
        assert register(client).status_code == status.HTTP_200_OK
        response = register(client, email="other@example.com")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": "Username or email already exists"}

        users = client.get("/api/admin/users").json()
        assert users["total"] == 1

    def test_duplicate_email_is_conflict(self, client):
        register(client)
        response = register(client, username="someoneelse")
        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.parametrize("missing", ["username", "email", "password"])
    def test_missing_field(self, client, missing):
        body = {"username": "calmuser", "email": "calm@example.com", "password": TEST_PASSWORD}
        del body[missing]
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Username, email, and password are required"

    def test_short_password_rejected_before_hashing(self, client):
        with patch("calmtype.routers.auth.hash_password") as hash_password:
            response = register(client, password="12345")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "at least 6" in response.json()["error"]
        hash_password.assert_not_called()
        assert client.get("/api/admin/users").json()["total"] == 0

    def test_password_over_bcrypt_limit(self, client):
        response = register(client, password="x" * 73)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Password is too long"

    def test_invalid_email(self, client):
        response = register(client, email="not-an-email")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid email address"

    def test_malformed_body_is_bad_request(self, client):
        response = client.post(
            "/api/auth/register", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.json()


class TestLogin:
    """POST /api/auth/login"""

    def test_login_with_username_or_email(self, client):
        user_id = register(client).json()["user"]["id"]
        for identifier in ("calmuser", "calm@example.com"):
            response = client.post("/api/auth/login", json={"username": identifier, "password": TEST_PASSWORD})
            assert response.status_code == status.HTTP_200_OK
            body = response.json()
            assert body["message"] == "Login successful"
            payload = jwt.decode(body["token"], TEST_JWT_SECRET, algorithms=["HS256"])
            assert payload["email"] == "calm@example.com"
            assert payload["userId"] == user_id
            assert body["user"]["id"] == user_id

    def test_login_sets_last_login(self, client):
        register(client)
        assert client.get("/api/admin/users").json()["users"][0]["last_login"] is None
        client.post("/api/auth/login", json={"username": "calmuser", "password": TEST_PASSWORD})
        assert client.get("/api/admin/users").json()["users"][0]["last_login"] is not None

    def test_wrong_password(self, client):
        register(client)
        response = client.post("/api/auth/login", json={"username": "calmuser", "password": "wrong-password"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid credentials"}

    def test_unknown_user_same_message(self, client):
        response = client.post("/api/auth/login", json={"username": "nobody", "password": TEST_PASSWORD})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid credentials"}

    def test_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"username": "calmuser"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_last_login_failure_does_not_fail_login(self, client):
        register(client)
        with patch("calmtype.routers.auth.users.touch_last_login", return_value=False) as touch:
            response = client.post("/api/auth/login", json={"username": "calmuser", "password": TEST_PASSWORD})
        assert response.status_code == status.HTTP_200_OK
        touch.assert_called_once()


class TestTokenGate:
    """Bearer token checks on /api/user/*"""

    def test_missing_token_is_unauthorized(self, client):
        response = client.get("/api/user/history")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Access token required"}

    def test_garbage_token_is_forbidden(self, client):
        response = client.get("/api/user/history", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Invalid or expired token"}

    def test_token_signed_with_other_secret_is_forbidden(self, client, settings):
        forged = create_access_token(
            TokenClaims("u1", "calmuser", "calm@example.com"),
            settings.model_copy(update={"jwt_secret": "another-secret"}),
        )
        response = client.get("/api/user/history", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_expired_token_is_forbidden(self, client):
        past = datetime.now(timezone.utc) - timedelta(hours=48)
        expired = jwt.encode(
            {"userId": "u1", "username": "a", "email": "a@b.co", "iat": past, "exp": past + timedelta(hours=24)},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        response = client.get("/api/user/history", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_me_returns_claims(self, client, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["username"] == "calmuser"
        assert body["email"] == "calm@example.com"
        assert body["userId"]


class TestTokenHelpers:
    def test_round_trip(self, settings):
        token = create_access_token(TokenClaims("abc", "calmuser", "calm@example.com"), settings)
        assert decode_access_token(token, settings) == TokenClaims("abc", "calmuser", "calm@example.com")


class TestGuestSession:
    """POST /api/auth/guest"""

    def test_create_guest(self, client):
        response = client.post("/api/auth/guest")
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Guest session created"
        assert body["expiresIn"] == "24h"
        assert len(body["guestId"]) == 36

    def test_guest_ids_are_unique(self, client):
        first = client.post("/api/auth/guest").json()["guestId"]
        second = client.post("/api/auth/guest").json()["guestId"]
        assert first != second
        assert client.get("/api/admin/guests").json()["total"] == 2
