# backend/balance_tracker/schemas/upload.py
"""
Pydantic schemas for balance file uploads.

The upload itself is multipart/form-data (year, month, file), so only
responses are modelled here.
"""

from pydantic import Field

from balance_tracker.schemas.base import CamelModel
from balance_tracker.services.upload.types import UploadOutcome


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class UploadBalanceResponse(CamelModel):
    """
    Result of processing one balance file.

    Returned with 200 when at least one record was stored and with 400
    otherwise; the body has the same shape in both cases.
    """

    success: bool = Field(
        ...,
        description="True if at least one balance was stored"
    )
    message: str = Field(
        ...,
        description="Summary of the result",
        examples=["Partially successful: 1 records processed, 1 records skipped"],
    )
    processed_records: int = Field(
        default=0,
        ge=0,
        description="Balances inserted or updated"
    )
    skipped_records: int = Field(
        default=0,
        ge=0,
        description="Rows skipped because the account is unknown or the write failed"
    )
    errors: list[str] = Field(
        default_factory=list,
        description="Per-row error messages in file order"
    )

    @classmethod
    def from_outcome(cls, outcome: UploadOutcome) -> "UploadBalanceResponse":
        return cls(
            success=outcome.success,
            message=outcome.message,
            processed_records=outcome.processed_records,
            skipped_records=outcome.skipped_records,
            errors=list(outcome.errors),
        )


class SupportedFormatsResponse(CamelModel):
    """File formats accepted by the upload endpoint."""

    extensions: list[str] = Field(
        ...,
        description="Accepted file extensions",
        examples=[[".csv", ".tsv", ".txt", ".xls", ".xlsx"]],
    )
    max_file_size_bytes: int = Field(..., description="Maximum upload size in bytes")
    max_records: int = Field(..., description="Maximum records per file")
    columns: list[str] = Field(
        default=["Account Name", "Amount"],
        description="Expected column order",
    )
