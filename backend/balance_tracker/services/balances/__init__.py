# backend/balance_tracker/services/balances/__init__.py
"""
Balance Query Service package.

Usage:
    from balance_tracker.services.balances import BalanceQueryService

    service = BalanceQueryService()
    latest = service.latest(db)
    summary = service.summary(db)
"""

from balance_tracker.services.balances.service import BalanceQueryService
from balance_tracker.services.balances.types import (
    AccountSummary,
    BalanceView,
    format_amount,
    format_period,
)

__all__ = [
    "BalanceQueryService",
    "AccountSummary",
    "BalanceView",
    "format_amount",
    "format_period",
]
