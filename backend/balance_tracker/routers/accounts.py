"""
Account endpoints.

Provides:
- GET /accounts - List active accounts (any role)
- GET /accounts/{account_id} - Get one account (any role)
- POST /accounts - Create an account (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.dependencies import (
    get_account_service,
    get_current_principal,
    require_capability,
)
from balance_tracker.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_WRITE
from balance_tracker.models import Account
from balance_tracker.schemas.accounts import AccountCreate, AccountResponse
from balance_tracker.services.accounts import AccountService
from balance_tracker.services.auth import Capability, Principal

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse], summary="List accounts")
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_accounts(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[AccountService, Depends(get_account_service)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    include_inactive: bool = Query(
        default=False,
        description="Include deactivated accounts"
    ),
) -> list[Account]:
    """List accounts ordered by name."""
    return service.list_accounts(db, include_inactive=include_inactive)


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account",
    responses={404: {"description": "Account not found"}},
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_account(
    request: Request,
    account_id: int,
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[AccountService, Depends(get_account_service)],
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Account:
    return service.get_account(db, account_id)


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create account",
    responses={
        403: {"description": "Admin role required"},
        409: {"description": "An account with this name already exists"},
    },
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_account(
    request: Request,
    data: AccountCreate,
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[AccountService, Depends(get_account_service)],
    principal: Annotated[Principal, Depends(require_capability(Capability.MANAGE_ACCOUNTS))],
) -> Account:
    """
    Create an account that uploads can be matched against.

    Names are unique regardless of case.
    """
    return service.create_account(db, data.name, is_active=data.is_active)
