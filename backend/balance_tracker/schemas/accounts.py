"""
Account request/response schemas.
"""

from datetime import datetime

from pydantic import Field

from balance_tracker.schemas.base import CamelModel


class AccountCreate(CamelModel):
    """Request body for creating an account."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique account name (case-insensitive)",
        examples=["Marketing"],
    )
    is_active: bool = Field(default=True)


class AccountResponse(CamelModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime
