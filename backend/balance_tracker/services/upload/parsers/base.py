# backend/balance_tracker/services/upload/parsers/base.py
"""
Abstract interface for balance file parsers.

Every parser turns a byte stream into a list of UploadCandidateRecord
(account name + amount) and reports problems on a shared UploadOutcome:

- A malformed row is recorded as an error and skipped; parsing continues.
- A stream that cannot be read at all becomes a single outcome error.
- An empty result adds a "no valid records" error and marks failure.

Parsers never look at accounts or the database; matching names to
accounts is the upload service's job.
"""

import threading
from abc import ABC, abstractmethod
from typing import BinaryIO

from balance_tracker.services.exceptions import UploadCancelledError
from balance_tracker.services.upload.parsers.amounts import parse_amount
from balance_tracker.services.upload.types import UploadCandidateRecord, UploadOutcome


class RowParseError(ValueError):
    """A single row could not be turned into a candidate record."""


class BalanceFileParser(ABC):
    """
    Abstract base class for balance file parsers.

    Subclasses declare the extensions they handle and implement parse().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable parser name (e.g., 'CSV')."""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> tuple[str, ...]:
        """Lower-case extensions including the leading dot (e.g., ('.csv',))."""
        pass

    @abstractmethod
    def parse(
            self,
            file: BinaryIO,
            outcome: UploadOutcome,
            cancel_event: threading.Event | None = None,
    ) -> list[UploadCandidateRecord]:
        """
        Parse a balance file.

        Args:
            file: Binary stream positioned at the start of the file
            outcome: Shared outcome receiving errors and the parse success flag
            cancel_event: Checked between rows; when set parsing stops

        Returns:
            Candidate records in file order

        Raises:
            UploadCancelledError: If cancel_event is set during parsing
        """
        pass

    # =========================================================================
    # SHARED HELPERS
    # =========================================================================

    @staticmethod
    def _raise_if_cancelled(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise UploadCancelledError()

    @staticmethod
    def _build_record(
            account_text: str,
            amount_text: str,
            row_number: int,
    ) -> UploadCandidateRecord:
        """
        Validate the two cleaned cell values of a row.

        Raises:
            RowParseError: With the user-facing reason the row was rejected
        """
        if not account_text:
            raise RowParseError("Account name cannot be empty")

        if not amount_text:
            raise RowParseError("Amount cannot be empty")

        try:
            amount = parse_amount(amount_text)
        except ValueError:
            raise RowParseError(f"Invalid amount format: {amount_text}")

        return UploadCandidateRecord(
            account_name=account_text,
            amount=amount,
            row_number=row_number,
        )

    @staticmethod
    def _finish(
            records: list[UploadCandidateRecord],
            outcome: UploadOutcome,
            empty_message: str,
    ) -> list[UploadCandidateRecord]:
        """Set the parse-level success flag, adding empty_message when nothing was read."""
        if records:
            outcome.success = True
        else:
            outcome.add_error(empty_message)
            outcome.success = False
        return records
