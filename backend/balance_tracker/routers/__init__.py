# backend/balance_tracker/routers/__init__.py
"""
API routers for the Account Balance Tracker.

Each router handles a specific domain:
- auth: Login and current principal
- balances: Balance queries, summaries and file upload
- accounts: Account listing and administration
"""

from balance_tracker.routers.accounts import router as accounts_router
from balance_tracker.routers.auth import router as auth_router
from balance_tracker.routers.balances import router as balances_router

__all__ = [
    "auth_router",
    "balances_router",
    "accounts_router",
]
