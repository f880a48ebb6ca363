# backend/balance_tracker/services/balances/service.py
"""
Balance Query Service.

Read-only projections of stored balance records:
- latest(): every balance of the most recent period
- by_period(): every balance of one period
- summary(): per-account aggregates over all periods
- summary_by_period(): per-account aggregates for one period

All lists are ordered by account name. Nothing here writes to the database.
"""

import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from balance_tracker.models import Account, BalanceRecord
from balance_tracker.services.balances.types import AccountSummary, BalanceView

logger = logging.getLogger(__name__)

# year * 100 + month orders periods chronologically: max() of it is the
# latest month of the latest year
_PERIOD_KEY = BalanceRecord.year * 100 + BalanceRecord.month


class BalanceQueryService:
    """Service for reading balances and account summaries."""

    def latest(self, db: Session) -> list[BalanceView]:
        """
        Return all balances of the most recent (year, month) present.

        Returns:
            Balances ordered by account name; empty if nothing was uploaded yet
        """
        latest_period = db.execute(
            select(BalanceRecord.year, BalanceRecord.month)
            .order_by(BalanceRecord.year.desc(), BalanceRecord.month.desc())
            .limit(1)
        ).first()

        if latest_period is None:
            logger.debug("No balance records stored yet")
            return []

        year, month = latest_period
        return self.by_period(db, year, month)

    def by_period(self, db: Session, year: int, month: int) -> list[BalanceView]:
        """Return all balances for one period, ordered by account name."""
        rows = db.execute(
            select(BalanceRecord, Account.name)
            .join(Account, BalanceRecord.account_id == Account.id)
            .where(BalanceRecord.year == year, BalanceRecord.month == month)
            .order_by(Account.name)
        ).all()

        return [
            BalanceView(
                id=record.id,
                account_id=record.account_id,
                account_name=account_name,
                year=record.year,
                month=record.month,
                amount=record.amount,
                uploaded_at=record.uploaded_at,
            )
            for record, account_name in rows
        ]

    def summary(self, db: Session) -> list[AccountSummary]:
        """
        Aggregate every account's balances over all periods.

        For each account: the latest period label, the sum of all its
        period amounts (a running total), the latest upload time and the
        number of periods recorded.
        """
        stmt = self._summary_query()
        return [self._to_summary(row) for row in db.execute(stmt).all()]

    def summary_by_period(self, db: Session, year: int, month: int) -> list[AccountSummary]:
        """Aggregate balances per account for a single period."""
        stmt = self._summary_query().where(
            BalanceRecord.year == year,
            BalanceRecord.month == month,
        )
        return [self._to_summary(row) for row in db.execute(stmt).all()]

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _summary_query() -> Select:
        return (
            select(
                Account.id.label("account_id"),
                Account.name.label("account_name"),
                func.max(_PERIOD_KEY).label("latest_period"),
                func.sum(BalanceRecord.amount).label("total_amount"),
                func.max(BalanceRecord.uploaded_at).label("last_updated_at"),
                func.count(BalanceRecord.id).label("record_count"),
            )
            .join(BalanceRecord, BalanceRecord.account_id == Account.id)
            .group_by(Account.id, Account.name)
            .order_by(Account.name)
        )

    @staticmethod
    def _to_summary(row: Any) -> AccountSummary:
        year, month = divmod(int(row.latest_period), 100)
        return AccountSummary(
            account_id=row.account_id,
            account_name=row.account_name,
            year=year,
            month=month,
            total_amount=row.total_amount,
            last_updated_at=row.last_updated_at,
            record_count=row.record_count,
        )
