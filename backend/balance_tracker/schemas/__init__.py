"""
Pydantic schemas for request/response validation.

All schemas serialize with camelCase keys (see base.CamelModel).
"""

from balance_tracker.schemas.accounts import AccountCreate, AccountResponse
from balance_tracker.schemas.auth import LoginRequest, LoginResponse, PrincipalResponse
from balance_tracker.schemas.balances import AccountSummaryResponse, BalanceResponse
from balance_tracker.schemas.base import CamelModel
from balance_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from balance_tracker.schemas.upload import SupportedFormatsResponse, UploadBalanceResponse
from balance_tracker.schemas.validators import validate_query_period, validate_upload_period

__all__ = [
    "CamelModel",
    "ErrorDetail",
    "ValidationErrorDetail",
    "LoginRequest",
    "LoginResponse",
    "PrincipalResponse",
    "BalanceResponse",
    "AccountSummaryResponse",
    "UploadBalanceResponse",
    "SupportedFormatsResponse",
    "AccountCreate",
    "AccountResponse",
    "validate_query_period",
    "validate_upload_period",
]
