# backend/balance_tracker/routers/balances.py
"""
Balance endpoints.

Provides:
- GET /balances/latest - Balances of the most recent period (any role)
- GET /balances/by-period - Balances of one period (admin)
- GET /balances/summary - Per-account totals over all periods (any role)
- GET /balances/summary/by-period - Per-account totals for one period (admin)
- POST /balances/upload - Upload a balance file for one period (admin)
- GET /balances/upload/formats - Accepted upload formats (any role)

Period parameters are validated here, before any service is called:
browsing accepts 2000 .. next year, uploads reject future periods.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from balance_tracker.config import settings
from balance_tracker.database import get_db
from balance_tracker.dependencies import (
    get_balance_query_service,
    get_current_principal,
    get_parser_registry,
    get_upload_service,
    require_capability,
)
from balance_tracker.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_UPLOAD
from balance_tracker.schemas.balances import AccountSummaryResponse, BalanceResponse
from balance_tracker.schemas.upload import SupportedFormatsResponse, UploadBalanceResponse
from balance_tracker.schemas.validators import validate_query_period, validate_upload_period
from balance_tracker.services.auth import Capability, Principal
from balance_tracker.services.balances import BalanceQueryService
from balance_tracker.services.exceptions import InvalidFileFormatError, UploadCancelledError
from balance_tracker.services.upload import BalanceUploadService, ParserRegistry

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/balances",
    tags=["Balances"],
)

YearQuery = Annotated[int, Query(description="Period year (2000 .. next year)")]
MonthQuery = Annotated[int, Query(description="Period month (1-12)")]


# =============================================================================
# QUERIES
# =============================================================================

@router.get(
    "/latest",
    response_model=list[BalanceResponse],
    summary="Balances of the latest period",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_latest_balances(
        request: Request,
        db: Annotated[Session, Depends(get_db)],
        service: Annotated[BalanceQueryService, Depends(get_balance_query_service)],
        principal: Annotated[Principal, Depends(require_capability(Capability.VIEW_BALANCES))],
) -> list[BalanceResponse]:
    """
    Return every balance of the most recent (year, month) that has data.

    The list is ordered by account name and is empty when nothing has
    been uploaded yet.
    """
    return [BalanceResponse.from_view(view) for view in service.latest(db)]


@router.get(
    "/by-period",
    response_model=list[BalanceResponse],
    summary="Balances of one period",
    responses={
        400: {"description": "Invalid year or month"},
        403: {"description": "Admin role required"},
    },
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_balances_by_period(
        request: Request,
        year: YearQuery,
        month: MonthQuery,
        db: Annotated[Session, Depends(get_db)],
        service: Annotated[BalanceQueryService, Depends(get_balance_query_service)],
        principal: Annotated[Principal, Depends(require_capability(Capability.VIEW_PERIOD_BALANCES))],
) -> list[BalanceResponse]:
    """Return every balance stored for one period, ordered by account name."""
    validate_query_period(year, month)
    return [BalanceResponse.from_view(view) for view in service.by_period(db, year, month)]


@router.get(
    "/summary",
    response_model=list[AccountSummaryResponse],
    summary="Per-account balance summary",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_summary(
        request: Request,
        db: Annotated[Session, Depends(get_db)],
        service: Annotated[BalanceQueryService, Depends(get_balance_query_service)],
        principal: Annotated[Principal, Depends(require_capability(Capability.VIEW_BALANCES))],
) -> list[AccountSummaryResponse]:
    """
    Summarize every account's balances.

    For each account:
    - `year`/`month`: latest period with a balance
    - `totalAmount`: sum over **all** periods (a running total, not the
      balance of the latest period)
    - `lastUpdatedAt`: most recent upload
    - `recordCount`: number of periods recorded
    """
    return [AccountSummaryResponse.from_summary(s) for s in service.summary(db)]


@router.get(
    "/summary/by-period",
    response_model=list[AccountSummaryResponse],
    summary="Per-account summary for one period",
    responses={
        400: {"description": "Invalid year or month"},
        403: {"description": "Admin role required"},
    },
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_summary_by_period(
        request: Request,
        year: YearQuery,
        month: MonthQuery,
        db: Annotated[Session, Depends(get_db)],
        service: Annotated[BalanceQueryService, Depends(get_balance_query_service)],
        principal: Annotated[Principal, Depends(require_capability(Capability.VIEW_PERIOD_BALANCES))],
) -> list[AccountSummaryResponse]:
    """Summarize balances per account for a single period."""
    validate_query_period(year, month)
    return [
        AccountSummaryResponse.from_summary(s)
        for s in service.summary_by_period(db, year, month)
    ]


# =============================================================================
# UPLOAD
# =============================================================================

@router.get(
    "/upload/formats",
    response_model=SupportedFormatsResponse,
    summary="List supported upload formats",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_supported_formats(
        request: Request,
        registry: Annotated[ParserRegistry, Depends(get_parser_registry)],
        upload_service: Annotated[BalanceUploadService, Depends(get_upload_service)],
        principal: Annotated[Principal, Depends(get_current_principal)],
) -> SupportedFormatsResponse:
    """
    Get the file types accepted by POST /balances/upload.

    Only extensions that are both allowed by configuration and handled by
    a parser are listed.
    """
    extensions = [
        ext for ext in registry.supported_extensions
        if ext in upload_service.allowed_extensions
    ]
    return SupportedFormatsResponse(
        extensions=extensions,
        max_file_size_bytes=upload_service.max_file_size_bytes,
        max_records=upload_service.max_records,
    )


@router.post(
    "/upload",
    response_model=UploadBalanceResponse,
    summary="Upload a balance file",
    responses={
        200: {"description": "At least one balance was stored", "model": UploadBalanceResponse},
        400: {"description": "Invalid period or file, or no balance could be stored"},
        401: {"description": "Not authenticated"},
        403: {"description": "Admin role required"},
        500: {"description": "Unexpected failure"},
    },
)
@limiter.limit(RATE_LIMIT_UPLOAD)
def upload_balances(
        request: Request,  # Required for rate limiting
        year: Annotated[int, Form(description="Period year")],
        month: Annotated[int, Form(description="Period month (1-12)")],
        db: Annotated[Session, Depends(get_db)],
        upload_service: Annotated[BalanceUploadService, Depends(get_upload_service)],
        principal: Annotated[Principal, Depends(require_capability(Capability.UPLOAD_BALANCES))],
        file: UploadFile | None = File(
            default=None,
            description="Balance file (CSV, TSV, TXT, XLSX or XLS)"
        ),
) -> UploadBalanceResponse | JSONResponse:
    """
    Upload account balances for one period.

    **File layout:** two columns, account name then amount. An optional
    header row is detected automatically.

    ```
    Account Name,Amount
    R&D,85000.00
    Canteen,"1,234.56"
    ```

    **Behavior:**
    - Account names are matched case-insensitively against active accounts.
    - Each matched account gets exactly one balance per period: uploading
      again for the same period overwrites the amount.
    - Unknown accounts are skipped and reported; the remaining rows are
      still stored.

    **Status codes:**
    - **200** if at least one balance was stored (check `skippedRecords`)
    - **400** for a future/invalid period, a missing file or when no
      balance could be stored (same body as 200)
    - **500** on an unexpected failure
    """
    validate_upload_period(year, month)

    if file is None or not file.filename:
        raise InvalidFileFormatError("File is required")

    file_content = file.file.read()
    file_size = len(file_content)
    file.file.seek(0)  # Reset for processing

    if file_size == 0:
        raise InvalidFileFormatError("File is required", filename=file.filename)

    logger.info(
        f"Upload request: {file.filename} ({file_size} bytes) for {year}-{month:02d} "
        f"by user {principal.id}"
    )

    try:
        outcome = upload_service.execute(
            db=db,
            file=file.file,
            filename=file.filename,
            file_size=file_size,
            year=year,
            month=month,
            uploaded_by=principal.id,
        )
    except UploadCancelledError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error while uploading {file.filename}: {e}", exc_info=True)
        content = {"message": "Internal server error"}
        if not settings.is_production:
            content["error"] = str(e)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    response = UploadBalanceResponse.from_outcome(outcome)

    if not outcome.success:
        logger.warning(f"Upload failed: {outcome.message} ({outcome.error_count} errors)")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(by_alias=True, mode="json"),
        )

    logger.info(f"Upload successful: {outcome.message}")
    return response
