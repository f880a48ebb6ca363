# tests/routers/test_error_handling.py
"""
Tests for the global error envelope and health endpoints.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.dependencies import get_account_service
from balance_tracker.main import app
from tests.conftest import get_auth_headers


@pytest.fixture(scope="function")
def client(db: Session) -> TestClient:
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()


class TestErrorEnvelope:

    def test_envelope_fields(self, client):
        response = client.get("/api/v1/balances/latest")

        assert response.status_code == 401
        data = response.json()
        assert set(data) == {"success", "error", "message", "details", "traceId", "timestamp"}
        assert data["success"] is False
        assert data["error"] == "UnauthorizedError"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_trace_id_matches_correlation_header(self, client):
        response = client.get(
            "/api/v1/balances/latest", headers={"X-Correlation-ID": "trace-abc-123"}
        )

        assert response.json()["traceId"] == "trace-abc-123"
        assert response.headers["X-Correlation-ID"] == "trace-abc-123"

    def test_unknown_route(self, client):
        response = client.get("/api/v1/does-not-exist")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "NotFoundError"
        assert data["traceId"] == response.headers["X-Correlation-ID"]

    def test_request_validation_details_are_a_list(self, client):
        response = client.post("/api/v1/auth/login", json={"username": "admin"})

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["message"] == "Request validation failed"
        assert [d["field"] for d in data["details"]] == ["body.password"]

    def test_unhandled_exception_is_500(self, client, regular_user):
        service = MagicMock()
        service.list_accounts.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_account_service] = lambda: service

        response = client.get(
            "/api/v1/accounts",
            headers={**get_auth_headers(regular_user), "X-Correlation-ID": "trace-500"},
        )

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "InternalServerError"
        assert data["message"] == "An internal server error occurred"
        assert data["details"] == {"exception": "boom"}
        assert data["traceId"] == "trace-500"


class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["api"] == "/api/v1"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert data["checks"]["database"]["database"] == "sqlite"
        assert data["checks"]["database"]["latencyMs"] >= 0

    def test_liveness(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
