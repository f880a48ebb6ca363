# backend/balance_tracker/schemas/balances.py
"""
Balance response schemas.

Amounts are Decimals and serialize as JSON strings ("85000.00") so no
precision is lost on the way to the client.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from balance_tracker.schemas.base import CamelModel
from balance_tracker.services.balances.types import AccountSummary, BalanceView


class BalanceResponse(CamelModel):
    """One account's balance for one period."""

    id: int = Field(..., description="Balance record ID")
    account_id: int = Field(..., description="Account ID")
    account: str = Field(..., description="Account name", examples=["R&D"])
    account_name: str = Field(..., description="Account name (same as account)")
    year: int = Field(..., description="Period year")
    month: int = Field(..., ge=1, le=12, description="Period month")
    amount: Decimal = Field(..., description="Balance amount", examples=["85000.00"])
    uploaded_at: datetime = Field(..., description="When this balance was last uploaded")

    @classmethod
    def from_view(cls, view: BalanceView) -> "BalanceResponse":
        return cls(
            id=view.id,
            account_id=view.account_id,
            account=view.account_name,
            account_name=view.account_name,
            year=view.year,
            month=view.month,
            amount=view.amount,
            uploaded_at=view.uploaded_at,
        )


class AccountSummaryResponse(CamelModel):
    """Aggregated balances of one account."""

    account_id: int
    account_name: str
    year: int = Field(..., description="Latest year with a balance")
    month: int = Field(..., description="Latest month within that year")
    total_amount: Decimal = Field(
        ...,
        description="Sum of the account's balances over the summarized periods",
    )
    last_updated_at: datetime
    record_count: int = Field(..., description="Number of periods summarized")
    period_display: str = Field(..., examples=["2025-08"])
    formatted_amount: str = Field(..., examples=["85,000.00"])

    @classmethod
    def from_summary(cls, summary: AccountSummary) -> "AccountSummaryResponse":
        return cls(
            account_id=summary.account_id,
            account_name=summary.account_name,
            year=summary.year,
            month=summary.month,
            total_amount=summary.total_amount,
            last_updated_at=summary.last_updated_at,
            record_count=summary.record_count,
            period_display=summary.period_display,
            formatted_amount=summary.formatted_amount,
        )
