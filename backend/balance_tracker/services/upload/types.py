# backend/balance_tracker/services/upload/types.py
"""
Data classes shared by the balance file parsers and the upload service.

UploadCandidateRecord lives only for the duration of one upload: parsers
produce it, the service resolves its account name and discards it.

UploadOutcome is built up across the whole pipeline. Parsers append row
errors and set the parse-level success flag; the service then overwrites
success/message with the reconciliation result.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class UploadCandidateRecord:
    """
    One (account name, amount) pair read from an uploaded file.

    Attributes:
        account_name: Free-text account name as written in the file
        amount: Parsed balance amount
        row_number: 1-based line or row number in the source file
    """

    account_name: str
    amount: Decimal
    row_number: int = 0


@dataclass
class UploadOutcome:
    """
    Result of processing one uploaded balance file.

    Attributes:
        success: True if at least one record was stored (after reconciliation),
                 or if parsing produced records (while still parsing)
        message: Human-readable summary
        processed_records: Records inserted or updated
        skipped_records: Records skipped (unknown account, failed upsert)
        errors: Ordered, human-readable error messages
    """

    success: bool = False
    message: str = ""
    processed_records: int = 0
    skipped_records: int = 0
    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Append an error message."""
        self.errors.append(message)

    def fail(self, message: str) -> "UploadOutcome":
        """Mark the outcome failed with a single reason and return it."""
        self.success = False
        self.message = message
        self.errors.append(message)
        return self

    @property
    def error_count(self) -> int:
        return len(self.errors)
