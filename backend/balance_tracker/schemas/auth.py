"""
Authentication request/response schemas.
"""

from datetime import datetime

from pydantic import Field

from balance_tracker.schemas.base import CamelModel


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================


class LoginRequest(CamelModel):
    """Request body for login."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Login name (case-insensitive)",
        examples=["admin"],
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password",
    )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class LoginResponse(CamelModel):
    """Response containing the access token."""

    access_token: str = Field(
        ...,
        description="JWT access token for the Authorization header",
    )
    expires_at: datetime = Field(
        ...,
        description="Absolute expiry of the token (UTC)",
    )
    roles: list[str] = Field(
        ...,
        description="Role names granted to the user",
        examples=[["Admin"]],
    )
    token_type: str = Field(
        default="bearer",
        description="Token type (always 'bearer')",
    )


class PrincipalResponse(CamelModel):
    """The authenticated user."""

    id: int = Field(..., description="User's unique ID")
    username: str = Field(..., description="Login name")
    email: str = Field(..., description="User's email address")
    is_active: bool = Field(..., description="Whether the account is active")
    roles: list[str] = Field(..., description="Role names granted to the user")
