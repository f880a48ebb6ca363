# backend/balance_tracker/services/__init__.py
"""
Service layer for business logic.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions (see exceptions.py)
- Receive database sessions as parameters (not via Depends)

Architecture:
    services/
    ├── __init__.py          # This file - main exports
    ├── exceptions.py        # Domain exceptions
    ├── constants.py         # Business constants and limits
    ├── accounts.py          # Account listing / creation
    ├── auth/                # Login, JWT, passwords, role policy
    ├── balances/            # Balance Query Service
    └── upload/              # Balance upload reconciliation + parsers
"""

from balance_tracker.services.accounts import AccountService
from balance_tracker.services.auth import AuthService
from balance_tracker.services.balances import BalanceQueryService
from balance_tracker.services.upload import BalanceUploadService, build_default_registry

__all__ = [
    "AccountService",
    "AuthService",
    "BalanceQueryService",
    "BalanceUploadService",
    "build_default_registry",
]
