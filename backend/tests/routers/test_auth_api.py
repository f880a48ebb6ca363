# tests/routers/test_auth_api.py
"""
API layer tests for authentication endpoints.

Tests:
- POST /api/v1/auth/login
- GET /api/v1/auth/me
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.main import app
from balance_tracker.services.auth.jwt_handler import JWTHandler
from tests.conftest import create_user, get_auth_headers

LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"


@pytest.fixture(scope="function")
def client(db: Session) -> TestClient:
    """Create TestClient with database dependency override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# TEST: LOGIN
# =============================================================================


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client, admin_user):
        response = client.post(LOGIN_URL, json={"username": "admin", "password": "Admin@123"})

        assert response.status_code == 200
        data = response.json()
        assert data["roles"] == ["Admin"]
        assert data["tokenType"] == "bearer"
        assert "expiresAt" in data
        payload = JWTHandler.validate_access_token(data["accessToken"])
        assert payload["sub"] == str(admin_user.id)

    def test_wrong_password(self, client, admin_user):
        response = client.post(LOGIN_URL, json={"username": "admin", "password": "wrong"})

        assert response.status_code == 401
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "InvalidCredentialsError"
        assert data["message"] == "Invalid username or password"
        assert "accessToken" not in data
        assert "roles" not in data

    def test_unknown_user(self, client):
        response = client.post(LOGIN_URL, json={"username": "ghost", "password": "whatever"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid username or password"

    def test_inactive_user(self, client, db):
        create_user(db, username="former", password="Former@123", is_active=False)

        response = client.post(LOGIN_URL, json={"username": "former", "password": "Former@123"})

        assert response.status_code == 401
        assert response.json()["message"] == "Account is inactive"

    def test_missing_fields(self, client):
        response = client.post(LOGIN_URL, json={"username": "admin"})

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"


# =============================================================================
# TEST: CURRENT USER
# =============================================================================


class TestMe:
    """Tests for GET /auth/me."""

    def test_returns_principal(self, client, regular_user):
        response = client.get(ME_URL, headers=get_auth_headers(regular_user))

        assert response.status_code == 200
        assert response.json() == {
            "id": regular_user.id,
            "username": "john.doe",
            "email": regular_user.email,
            "isActive": True,
            "roles": ["User"],
        }

    def test_without_token(self, client):
        response = client.get(ME_URL)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["message"] == "Not authenticated"

    def test_expired_token(self, client, admin_user):
        issued = JWTHandler.create_access_token(
            user_id=admin_user.id,
            username=admin_user.username,
            email=admin_user.email,
            roles=admin_user.role_names,
            expires_delta=timedelta(seconds=-5),
        )

        response = client.get(ME_URL, headers={"Authorization": f"Bearer {issued.token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Token has expired"

    def test_garbage_token(self, client):
        response = client.get(ME_URL, headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, db, admin_user):
        headers = get_auth_headers(admin_user)
        db.delete(admin_user)
        db.commit()

        response = client.get(ME_URL, headers=headers)

        assert response.status_code == 401
        assert response.json()["message"] == "User not found"

    def test_deactivated_after_login(self, client, db, admin_user):
        headers = get_auth_headers(admin_user)
        admin_user.is_active = False
        db.commit()

        response = client.get(ME_URL, headers=headers)

        assert response.status_code == 401
        assert response.json()["message"] == "User account is inactive"
