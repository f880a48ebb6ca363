# backend/balance_tracker/middleware/rate_limit.py
"""
Rate limiting middleware for API protection.

Uses slowapi to throttle clients by IP address. Limits are defined in
balance_tracker/services/constants.py per endpoint type (read, write,
upload, login, health). Setting RATE_LIMIT_ENABLED=false turns the limiter
off, which the test suite does.

Key by: Client IP address (X-Forwarded-For only from trusted proxies)
Storage: In-memory

Usage:
    from balance_tracker.middleware.rate_limit import limiter, RATE_LIMIT_UPLOAD

    @router.post("/upload")
    @limiter.limit(RATE_LIMIT_UPLOAD)
    def upload(request: Request, ...):
        ...
"""

import logging
from datetime import datetime, timezone

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from balance_tracker.config import settings
from balance_tracker.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_AUTH_LOGIN,
)
from balance_tracker.utils.context import get_correlation_id

logger = logging.getLogger(__name__)

# Seconds suggested to the client in the Retry-After header
DEFAULT_RETRY_AFTER = 60


def _is_trusted_proxy(request: Request) -> bool:
    """Check if the immediate client is allowed to set forwarding headers."""
    if settings.trust_proxy_headers:
        return True

    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Forwarded headers are only honoured when the immediate client is a
    trusted proxy, so clients cannot spoof their own key.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Return a 429 response in the standard error envelope with Retry-After.
    """
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(
        f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {"retryAfter": DEFAULT_RETRY_AFTER},
            "traceId": get_correlation_id() or getattr(request.state, "correlation_id", None),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_UPLOAD",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_AUTH_LOGIN",
]
