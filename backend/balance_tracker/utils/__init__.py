# backend/balance_tracker/utils/__init__.py
"""
Cross-cutting utilities:
- logging: Logging configuration with correlation ID support
- context: Request context management for correlation IDs

Usage:
    from balance_tracker.utils import setup_logging, get_correlation_id
"""

from balance_tracker.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from balance_tracker.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
]
