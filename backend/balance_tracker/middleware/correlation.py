# backend/balance_tracker/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For every request the middleware:
1. Takes the ID from X-Correlation-ID or X-Request-ID, or generates a UUID
2. Stores it in the request context and on request.state
3. Echoes it in the X-Correlation-ID response header

The same ID is reported as "traceId" in error responses, so a client can
quote it when reporting a failure and it can be found in the logs.
"""

import logging
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from balance_tracker.utils.context import set_correlation_id, clear_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that manages correlation IDs for request tracing."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)

        set_correlation_id(correlation_id)
        # Kept on the request too: the outermost error handler runs after
        # this middleware has cleared the context variable
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()

    def _get_correlation_id(self, request: Request) -> str:
        """
        Extract correlation ID from request headers or generate a new one.

        Checks X-Correlation-ID, then X-Request-ID, then generates a UUID4.
        """
        correlation_id = request.headers.get(CORRELATION_ID_HEADER)
        if correlation_id:
            return correlation_id

        correlation_id = request.headers.get(REQUEST_ID_HEADER)
        if correlation_id:
            return correlation_id

        return str(uuid.uuid4())
