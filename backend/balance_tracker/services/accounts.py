# backend/balance_tracker/services/accounts.py
"""
Account management service.

Accounts are the fixed set of ledger buckets that uploaded balances are
matched against. Names are unique regardless of case, because uploads
resolve them case-insensitively.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from balance_tracker.models import Account
from balance_tracker.services.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for listing and creating accounts."""

    def list_accounts(self, db: Session, include_inactive: bool = False) -> list[Account]:
        """Return accounts ordered by name."""
        stmt = select(Account).order_by(Account.name)
        if not include_inactive:
            stmt = stmt.where(Account.is_active == True)  # noqa: E712
        return list(db.execute(stmt).scalars().all())

    def get_account(self, db: Session, account_id: int) -> Account:
        """
        Raises:
            AccountNotFoundError: If no account has this ID
        """
        account = db.get(Account, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def get_by_name(self, db: Session, name: str) -> Account | None:
        """Case-insensitive lookup by name."""
        return db.execute(
            select(Account).where(func.lower(Account.name) == name.strip().lower())
        ).scalar_one_or_none()

    def create_account(self, db: Session, name: str, is_active: bool = True) -> Account:
        """
        Create a new account.

        Raises:
            ValidationError: If the name is blank
            DuplicateAccountError: If an account with this name exists (any case)
        """
        clean_name = name.strip()
        if not clean_name:
            raise ValidationError("Account name cannot be empty", field="name")

        if self.get_by_name(db, clean_name) is not None:
            raise DuplicateAccountError(clean_name)

        account = Account(name=clean_name, is_active=is_active)
        db.add(account)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateAccountError(clean_name)

        db.refresh(account)
        logger.info(f"Account created: {account.name} (id={account.id})")
        return account
