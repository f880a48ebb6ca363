# backend/balance_tracker/dependencies.py
"""
Dependency injection module for FastAPI services.

Services are stateless apart from their configuration, so one instance of
each is shared across all requests. They are lazily initialized on first
use to avoid import-time side effects.

Usage in routers:
    from balance_tracker.dependencies import (
        get_balance_query_service,
        get_current_principal,
        require_capability,
    )

    @router.get("/")
    def list_balances(
        service: BalanceQueryService = Depends(get_balance_query_service),
        principal: Principal = Depends(require_capability(Capability.VIEW_BALANCES)),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from balance_tracker.config import settings
from balance_tracker.database import get_db
from balance_tracker.services.accounts import AccountService
from balance_tracker.services.auth import AuthService, Capability, Principal, ensure_allowed
from balance_tracker.services.auth.jwt_handler import JWTHandler
from balance_tracker.services.balances import BalanceQueryService
from balance_tracker.services.exceptions import (
    InvalidCredentialsError,
    TokenExpiredError,
)
from balance_tracker.services.upload import (
    BalanceUploadService,
    ParserRegistry,
    build_default_registry,
)

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT authentication
_bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: the registry is built before the upload service that uses it


@lru_cache(maxsize=1)
def get_parser_registry() -> ParserRegistry:
    """Get the singleton parser registry (immutable once built)."""
    logger.debug("Initializing singleton ParserRegistry")
    return build_default_registry()


@lru_cache(maxsize=1)
def get_upload_service() -> BalanceUploadService:
    """
    Get the singleton BalanceUploadService instance.

    Limits come from settings; the registry is shared with
    the supported-formats endpoint.
    """
    logger.debug("Initializing singleton BalanceUploadService")
    return BalanceUploadService(
        registry=get_parser_registry(),
        max_file_size_bytes=settings.upload_max_file_size_bytes,
        allowed_extensions=settings.upload_allowed_extensions,
        max_records=settings.upload_max_records,
    )


@lru_cache(maxsize=1)
def get_balance_query_service() -> BalanceQueryService:
    logger.debug("Initializing singleton BalanceQueryService")
    return BalanceQueryService()


@lru_cache(maxsize=1)
def get_account_service() -> AccountService:
    logger.debug("Initializing singleton AccountService")
    return AccountService()


# =============================================================================
# AUTHENTICATION SERVICES
# =============================================================================


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    """
    Get the singleton AuthService instance.

    Handles login and token-to-principal resolution.
    """
    logger.debug("Initializing singleton AuthService")
    return AuthService()


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Principal:
    """
    Dependency that extracts and validates the caller from the bearer token.

    Usage:
        @router.get("/protected")
        def protected_endpoint(principal: Principal = Depends(get_current_principal)):
            return {"user_id": principal.id}

    Raises:
        HTTPException 401: If no token provided or token is invalid/expired
        HTTPException 401: If user not found or inactive
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = JWTHandler.validate_access_token(credentials.credentials)
        user_id = int(payload["sub"])
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidCredentialsError as e:
        raise _unauthorized(str(e))
    except (KeyError, ValueError):
        raise _unauthorized("Invalid token subject")

    principal = auth_service.get_principal(db, user_id)
    if principal is None:
        raise _unauthorized("User not found")

    if not principal.is_active:
        raise _unauthorized("User account is inactive")

    return principal


def require_capability(capability: Capability) -> Callable[..., Principal]:
    """
    Build a dependency that admits only principals granted `capability`.

    Usage:
        @router.post("/upload")
        def upload(
            principal: Principal = Depends(require_capability(Capability.UPLOAD_BALANCES)),
        ):
            ...

    Raises:
        HTTPException 401: Via get_current_principal
        PermissionDeniedError: Mapped to 403 by the global handler
    """

    def dependency(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        ensure_allowed(principal.roles, capability)
        return principal

    dependency.__name__ = f"require_{capability.value}"
    return dependency
