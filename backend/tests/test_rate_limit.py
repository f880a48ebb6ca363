# tests/test_rate_limit.py
"""
Tests for the rate limiter's client key.
"""

from starlette.requests import Request

from balance_tracker.middleware.rate_limit import _get_client_ip
from balance_tracker.config import settings


def make_request(client_host: str, headers: dict[str, str] | None = None) -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 5000),
    })


class TestClientIp:

    def test_direct_client(self):
        assert _get_client_ip(make_request("198.51.100.7")) == "198.51.100.7"

    def test_forwarded_header_ignored_from_untrusted_client(self, monkeypatch):
        monkeypatch.setattr(settings, "trust_proxy_headers", False)
        request = make_request("198.51.100.7", {"X-Forwarded-For": "203.0.113.5"})

        assert _get_client_ip(request) == "198.51.100.7"

    def test_forwarded_header_from_trusted_proxy(self, monkeypatch):
        monkeypatch.setattr(settings, "trust_proxy_headers", False)
        monkeypatch.setattr(settings, "trusted_proxy_ips", ["10.0.0.2"])
        request = make_request("10.0.0.2", {"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})

        assert _get_client_ip(request) == "203.0.113.5"

    def test_real_ip_fallback(self, monkeypatch):
        monkeypatch.setattr(settings, "trust_proxy_headers", True)
        request = make_request("10.0.0.2", {"X-Real-IP": "203.0.113.9"})

        assert _get_client_ip(request) == "203.0.113.9"
