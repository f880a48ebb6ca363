# backend/balance_tracker/middleware/__init__.py
"""
ASGI middleware:
- Correlation ID tracking for request tracing
- Rate limiting for API protection

Usage:
    from balance_tracker.middleware import CorrelationIdMiddleware, limiter

    app.add_middleware(CorrelationIdMiddleware)
    app.state.limiter = limiter
"""

from balance_tracker.middleware.correlation import CorrelationIdMiddleware, CORRELATION_ID_HEADER
from balance_tracker.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_AUTH_LOGIN,
)

__all__ = [
    "CorrelationIdMiddleware",
    "CORRELATION_ID_HEADER",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_UPLOAD",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_AUTH_LOGIN",
]
