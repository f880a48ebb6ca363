# backend/balance_tracker/services/balances/types.py
"""
Read-only views returned by the Balance Query Service.

These dataclasses are NOT Pydantic schemas - those are defined in
balance_tracker/schemas/balances.py for API serialization.

- BalanceView: one stored balance for one account and period
- AccountSummary: balances of one account aggregated over periods
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


def format_period(year: int, month: int) -> str:
    """Render a period as 'YYYY-MM'."""
    return f"{year}-{month:02d}"


def format_amount(amount: Decimal) -> str:
    """Render an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


@dataclass(frozen=True)
class BalanceView:
    """One BalanceRecord joined with its account name."""

    id: int
    account_id: int
    account_name: str
    year: int
    month: int
    amount: Decimal
    uploaded_at: datetime


@dataclass(frozen=True)
class AccountSummary:
    """
    Aggregated balances of one account.

    Attributes:
        account_id: Database ID of the account
        account_name: Display name of the account
        year: Latest year with a balance
        month: Latest month within that year
        total_amount: Sum of amounts over every summarized period
                      (a running total, not the balance of one period)
        last_updated_at: Most recent upload time
        record_count: Number of period records summarized
    """

    account_id: int
    account_name: str
    year: int
    month: int
    total_amount: Decimal
    last_updated_at: datetime
    record_count: int

    @property
    def period_display(self) -> str:
        return format_period(self.year, self.month)

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.total_amount)
