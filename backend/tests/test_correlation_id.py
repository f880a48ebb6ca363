# tests/test_correlation_id.py
"""
Tests for correlation ID context and middleware.
"""

import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from balance_tracker.middleware import CorrelationIdMiddleware
from balance_tracker.utils.context import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestContext:

    def test_default_is_none(self):
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_clear(self):
        set_correlation_id("abc-123")
        assert get_correlation_id() == "abc-123"

        clear_correlation_id()
        assert get_correlation_id() is None


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_middleware(CorrelationIdMiddleware)

    @app.get("/echo")
    def echo():
        return {"correlationId": get_correlation_id()}

    return TestClient(app)


class TestMiddleware:

    def test_generates_uuid(self, client):
        response = client.get("/echo")

        generated = response.headers["X-Correlation-ID"]
        assert uuid.UUID(generated)
        assert response.json()["correlationId"] == generated

    def test_uses_correlation_header(self, client):
        response = client.get("/echo", headers={"X-Correlation-ID": "from-client"})

        assert response.headers["X-Correlation-ID"] == "from-client"
        assert response.json()["correlationId"] == "from-client"

    def test_falls_back_to_request_id(self, client):
        response = client.get("/echo", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"

    def test_correlation_header_wins(self, client):
        response = client.get(
            "/echo", headers={"X-Correlation-ID": "corr", "X-Request-ID": "req"}
        )

        assert response.headers["X-Correlation-ID"] == "corr"
