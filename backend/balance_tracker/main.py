# backend/balance_tracker/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers global exception handlers
- Registers all routers under the versioned API prefix
- Defines global endpoints (health checks)
"""

import logging
from typing import Any

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from balance_tracker.config import settings
from balance_tracker.database import check_database_health, get_db
from balance_tracker.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from balance_tracker.routers import accounts_router, auth_router, balances_router
from balance_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from balance_tracker.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidFileFormatError,
    NotFoundError,
    DuplicateError,
    UploadCancelledError,
    # Authentication exceptions
    AuthenticationError,
    TokenExpiredError,
    # Authorization exceptions
    AuthorizationError,
    PermissionDeniedError,
)
from balance_tracker.utils import get_correlation_id, setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Monthly account balance uploads, queries and summaries",
    version="0.1.0",
    debug=settings.debug,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================
# Origins are configured via CORS_ORIGINS environment variable

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

# Extracts/generates correlation IDs and adds them to response headers
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions are converted to the standard error envelope.
# Starlette picks the handler of the most specific registered class, so
# AccountNotFoundError is served by the NotFoundError handler, etc.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _trace_id(request: Request) -> str | None:
    # The context is already cleared when the outermost 500 handler runs
    return get_correlation_id() or getattr(request.state, "correlation_id", None)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
    model: type[ErrorDetail] = ErrorDetail,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model(
            error=error,
            message=message,
            details=details,
            trace_id=_trace_id(request),
        ).model_dump(by_alias=True, mode="json"),
        headers=headers,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing resources (404)."""
    logger.warning(f"Not found: {exc}")
    return _error_response(
        request,
        404,
        type(exc).__name__,
        str(exc),
        details={
            "resourceType": exc.resource_type,
            "resourceId": exc.resource_id,
        } if exc.resource_type else None,
    )


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """Handle uniqueness conflicts (409)."""
    logger.warning(f"Duplicate: {exc}")
    return _error_response(
        request,
        409,
        type(exc).__name__,
        str(exc),
        details={"resourceType": exc.resource_type} if exc.resource_type else None,
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors, bad files and business rule violations (400)."""
    logger.warning(f"Validation error: {exc}")
    details: dict[str, Any] = {}
    if exc.field:
        details["field"] = exc.field
    if isinstance(exc, InvalidFileFormatError) and exc.filename:
        details["filename"] = exc.filename
    return _error_response(request, 400, type(exc).__name__, str(exc), details=details or None)


@app.exception_handler(UploadCancelledError)
async def upload_cancelled_handler(request: Request, exc: UploadCancelledError) -> JSONResponse:
    """Handle uploads cancelled mid-processing (408)."""
    logger.warning(f"Upload cancelled: {exc}")
    return _error_response(request, 408, "UploadCancelledError", str(exc))


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(request, 500, "ServiceError", str(exc))


# =============================================================================
# AUTHENTICATION EXCEPTION HANDLERS
# =============================================================================


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """
    Handle authentication errors (401).

    Covers invalid credentials, expired tokens and inactive accounts.
    """
    logger.warning(f"Authentication failed: {type(exc).__name__}")
    details = {"tokenType": exc.token_type} if isinstance(exc, TokenExpiredError) else None
    return _error_response(
        request,
        401,
        type(exc).__name__,
        str(exc),
        details=details,
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(
    request: Request, exc: AuthorizationError
) -> JSONResponse:
    """Handle permission denied errors (403)."""
    capability = exc.capability if isinstance(exc, PermissionDeniedError) else None
    logger.warning(f"Permission denied: {capability}")
    return _error_response(
        request,
        403,
        type(exc).__name__,
        str(exc),
        details={"capability": capability} if capability else None,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts FastAPI's default {"detail": "..."} format to the standard
    ErrorDetail format.
    """
    error_types = {
        400: "BadRequestError",
        401: "UnauthorizedError",
        403: "ForbiddenError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        408: "RequestTimeoutError",
        409: "ConflictError",
        413: "PayloadTooLargeError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return _error_response(
        request,
        exc.status_code,
        error_type,
        str(exc.detail) if exc.detail else "An error occurred",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic request validation errors (422).
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return _error_response(
        request,
        422,
        "ValidationError",
        "Request validation failed",
        details=errors,
        model=ValidationErrorDetail,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler (500).

    The exception text is only exposed outside production.
    """
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return _error_response(
        request,
        500,
        "InternalServerError",
        "An internal server error occurred",
        details=None if settings.is_production else {"exception": str(exc)},
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(auth_router, prefix=settings.api_prefix)  # /api/v1/auth/*
app.include_router(balances_router, prefix=settings.api_prefix)  # /api/v1/balances/*
app.include_router(accounts_router, prefix=settings.api_prefix)  # /api/v1/accounts/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "api": settings.api_prefix,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request):
    """
    Health check endpoint.

    **Response Status Codes:**
    - 200: Database reachable
    - 503: Database unreachable - do not route traffic here
    """
    database = check_database_health()
    response_data = {
        "status": database["status"],
        "environment": settings.environment,
        "checks": {"database": database},
    }

    if database["status"] != "healthy":
        return JSONResponse(status_code=503, content=response_data)

    return response_data


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness probe endpoint.

    Returns HTTP 200 if the application is running. Does NOT check
    dependencies - use /health/ready for that.
    """
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """
    Readiness probe endpoint.

    Returns HTTP 503 if the database is unavailable.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "error": "Database unavailable",
            },
        )
