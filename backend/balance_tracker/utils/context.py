# backend/balance_tracker/utils/context.py
"""
Request context management.

Holds the correlation ID of the request being served in a ContextVar, so
log records and error responses can be tied back to a single request
without passing the ID through every call.

Usage:
    from balance_tracker.utils.context import get_correlation_id, set_correlation_id

    # In middleware
    set_correlation_id("abc-123")

    # Anywhere during the request
    correlation_id = get_correlation_id()  # "abc-123"
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Called by CorrelationIdMiddleware at the start of each request.
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)
