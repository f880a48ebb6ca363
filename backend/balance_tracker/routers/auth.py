"""
Authentication endpoints.

Provides:
- POST /auth/login - Login with username/password
- GET /auth/me - Get the authenticated principal

Access tokens are stateless JWTs returned in the response body and sent
back as `Authorization: Bearer <token>`. There is no refresh flow: when a
token expires the client logs in again.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.dependencies import get_auth_service, get_current_principal
from balance_tracker.middleware.rate_limit import limiter, RATE_LIMIT_AUTH_LOGIN
from balance_tracker.schemas.auth import LoginRequest, LoginResponse, PrincipalResponse
from balance_tracker.services.auth import AuthService, Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with username and password",
    description=(
        "Authenticate with username and password. Returns a bearer access token, "
        "its absolute expiry and the user's roles."
    ),
    responses={
        401: {"description": "Invalid username or password, or account inactive"},
    },
)
@limiter.limit(RATE_LIMIT_AUTH_LOGIN)
def login(
    data: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Login with username and password."""
    token = auth_service.login(db=db, username=data.username, password=data.password)
    return LoginResponse(
        access_token=token.access_token,
        expires_at=token.expires_at,
        roles=token.roles,
        token_type=token.token_type,
    )


@router.get(
    "/me",
    response_model=PrincipalResponse,
    summary="Get current user",
    description="Get the identity and roles of the authenticated caller.",
)
def get_me(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> PrincipalResponse:
    """Return the authenticated principal."""
    return PrincipalResponse(
        id=principal.id,
        username=principal.username,
        email=principal.email,
        is_active=principal.is_active,
        roles=sorted(principal.roles),
    )
