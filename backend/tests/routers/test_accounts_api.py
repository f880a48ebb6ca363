# tests/routers/test_accounts_api.py
"""
API layer tests for account endpoints.

Tests:
- GET /api/v1/accounts
- GET /api/v1/accounts/{account_id}
- POST /api/v1/accounts
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.main import app
from tests.conftest import create_account, get_auth_headers

BASE_URL = "/api/v1/accounts"


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


class TestListAccounts:

    def test_lists_active_accounts_by_name(self, client, db, regular_user, default_accounts):
        create_account(db, "Archived", is_active=False)

        response = client.get(BASE_URL, headers=get_auth_headers(regular_user))

        assert response.status_code == 200
        names = [a["name"] for a in response.json()]
        assert names == sorted(default_accounts)
        assert "Archived" not in names

    def test_include_inactive(self, client, db, regular_user):
        create_account(db, "Archived", is_active=False)

        response = client.get(
            f"{BASE_URL}?include_inactive=true", headers=get_auth_headers(regular_user)
        )

        assert response.status_code == 200
        [account] = response.json()
        assert account["name"] == "Archived"
        assert account["isActive"] is False
        assert "createdAt" in account

    def test_requires_authentication(self, client):
        assert client.get(BASE_URL).status_code == 401


class TestGetAccount:

    def test_found(self, client, regular_user, default_accounts):
        account = default_accounts["Canteen"]

        response = client.get(f"{BASE_URL}/{account.id}", headers=get_auth_headers(regular_user))

        assert response.status_code == 200
        assert response.json()["name"] == "Canteen"

    def test_not_found_envelope(self, client, regular_user):
        response = client.get(f"{BASE_URL}/9999", headers=get_auth_headers(regular_user))

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "AccountNotFoundError"
        assert data["message"] == "Account '9999' not found"
        assert data["details"] == {"resourceType": "Account", "resourceId": 9999}


class TestCreateAccount:

    def test_admin_creates_account(self, client, admin_user):
        response = client.post(
            BASE_URL, json={"name": "  Travel  "}, headers=get_auth_headers(admin_user)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Travel"
        assert data["isActive"] is True

    def test_duplicate_name_any_case(self, client, admin_user, default_accounts):
        response = client.post(
            BASE_URL, json={"name": "marketing"}, headers=get_auth_headers(admin_user)
        )

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "DuplicateAccountError"
        assert data["details"] == {"resourceType": "Account"}

    def test_blank_name_rejected(self, client, admin_user):
        response = client.post(BASE_URL, json={"name": "   "}, headers=get_auth_headers(admin_user))

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "name"}

    def test_empty_name_is_request_validation_error(self, client, admin_user):
        response = client.post(BASE_URL, json={"name": ""}, headers=get_auth_headers(admin_user))

        assert response.status_code == 422

    def test_user_role_forbidden(self, client, regular_user):
        response = client.post(
            BASE_URL, json={"name": "Travel"}, headers=get_auth_headers(regular_user)
        )

        assert response.status_code == 403
        assert response.json()["details"] == {"capability": "manage_accounts"}
