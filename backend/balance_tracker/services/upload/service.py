# backend/balance_tracker/services/upload/service.py
"""
Balance upload service.

Orchestrates one balance file upload for a (year, month) period:
1. Validate file metadata (name, size, extension)
2. Select a parser from the registry
3. Parse the file into candidate records
4. Resolve account names against the active accounts (case-insensitive)
5. Upsert one BalanceRecord per matched account for the period
6. Commit once for the whole batch
7. Summarize the result in an UploadOutcome

Partial failure is expected: unknown accounts and failed upserts are
reported and skipped, the remaining rows are still stored. Validation of
year/month happens before this service is called.

Usage:
    service = BalanceUploadService(registry)
    outcome = service.execute(
        db=session,
        file=uploaded_file,
        filename="balances.csv",
        file_size=1024,
        year=2025,
        month=8,
        uploaded_by=user.id,
    )
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterable

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from balance_tracker.config import settings
from balance_tracker.models import Account, BalanceRecord
from balance_tracker.services.constants import INVALID_ACCOUNTS_PREVIEW_LIMIT
from balance_tracker.services.exceptions import UploadCancelledError
from balance_tracker.services.upload.parsers import (
    ParserRegistry,
    UnsupportedFileTypeError,
)
from balance_tracker.services.upload.types import UploadCandidateRecord, UploadOutcome

logger = logging.getLogger(__name__)


class BalanceUploadService:
    """
    Service for reconciling uploaded balance files with stored accounts.

    Limits default to the application settings and can be overridden per
    instance (tests use small limits).
    """

    def __init__(
            self,
            registry: ParserRegistry,
            max_file_size_bytes: int | None = None,
            allowed_extensions: Iterable[str] | None = None,
            max_records: int | None = None,
    ) -> None:
        self._registry = registry
        self._max_file_size_bytes = max_file_size_bytes or settings.upload_max_file_size_bytes
        self._allowed_extensions = tuple(
            ext.lower() for ext in (allowed_extensions or settings.upload_allowed_extensions)
        )
        self._max_records = max_records or settings.upload_max_records

    @property
    def allowed_extensions(self) -> tuple[str, ...]:
        return self._allowed_extensions

    @property
    def max_file_size_bytes(self) -> int:
        return self._max_file_size_bytes

    @property
    def max_records(self) -> int:
        return self._max_records

    def execute(
            self,
            db: Session,
            file: BinaryIO,
            filename: str,
            file_size: int,
            year: int,
            month: int,
            uploaded_by: int,
            cancel_event: threading.Event | None = None,
    ) -> UploadOutcome:
        """
        Process an uploaded balance file for one period.

        Args:
            db: Database session
            file: Binary stream of the uploaded file
            filename: Original filename (used for the extension)
            file_size: Size of the upload in bytes
            year: Period year
            month: Period month (1-12)
            uploaded_by: ID of the uploading user
            cancel_event: Optional signal checked between rows

        Returns:
            UploadOutcome; never raises for bad input or bad rows

        Raises:
            UploadCancelledError: If cancel_event is set while parsing
        """
        outcome = UploadOutcome()
        logger.info(f"Processing balance upload: {filename} for {year}-{month:02d}")

        try:
            # 1. Validate file metadata
            rejection = self._validate_file(filename, file_size)
            if rejection:
                logger.warning(f"Upload rejected: {rejection}")
                return outcome.fail(rejection)

            # 2. Select parser
            try:
                parser = self._registry.select_for_filename(filename)
            except UnsupportedFileTypeError as e:
                return outcome.fail(str(e))
            except Exception as e:
                logger.error(f"Parser selection failed for {filename}: {e}", exc_info=True)
                return outcome.fail(f"Error creating parser for file: {e}")

            # 3. Parse
            records = parser.parse(file, outcome, cancel_event)
            if not records and not outcome.success:
                outcome.message = outcome.errors[-1] if outcome.errors else "No valid records found in the file"
                return outcome

            if len(records) > self._max_records:
                return outcome.fail(
                    f"File contains {len(records)} records. "
                    f"Maximum allowed is {self._max_records}"
                )

            # 4-6. Reconcile and persist
            invalid_accounts = self._reconcile(db, records, year, month, uploaded_by, outcome)

            # 7. Summarize
            self._compose_message(outcome, invalid_accounts)

        except UploadCancelledError:
            logger.warning(f"Upload cancelled: {filename}")
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Upload processing failed for {filename}: {e}", exc_info=True)
            db.rollback()
            outcome.processed_records = 0
            outcome.add_error(f"Upload processing failed: {e}")
            outcome.success = False
            outcome.message = "Upload processing failed"
            return outcome

        logger.info(
            f"Upload completed: {filename} -> {outcome.processed_records} processed, "
            f"{outcome.skipped_records} skipped"
        )
        return outcome

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def _validate_file(self, filename: str, file_size: int) -> str | None:
        """Return a rejection message, or None if the file may be parsed."""
        if not filename or file_size <= 0:
            return "File is required and cannot be empty"

        if file_size > self._max_file_size_bytes:
            max_mb = self._max_file_size_bytes // (1024 * 1024)
            return f"File size cannot exceed {max_mb}MB"

        extension = Path(filename).suffix.lower()
        if extension not in self._allowed_extensions:
            return f"Only the following file types are allowed: {', '.join(self._allowed_extensions)}"

        return None

    # =========================================================================
    # RECONCILIATION
    # =========================================================================

    def _reconcile(
            self,
            db: Session,
            records: list[UploadCandidateRecord],
            year: int,
            month: int,
            uploaded_by: int,
            outcome: UploadOutcome,
    ) -> list[str]:
        """
        Upsert a balance per matched record and commit once.

        Each upsert is flushed inside its own savepoint, so a storage error
        on one row skips only that row. A failure of the final commit
        propagates and fails the whole batch.

        Returns:
            Names of accounts that were not found, in file order
        """
        accounts = self._load_account_lookup(db)
        existing = self._load_period_records(db, year, month)
        uploaded_at = datetime.now(timezone.utc)

        invalid_accounts: list[str] = []
        processed = 0
        skipped = 0

        for record in records:
            account = accounts.get(record.account_name.casefold())

            if account is None:
                skipped += 1
                invalid_accounts.append(record.account_name)
                outcome.add_error(
                    f"Invalid Account: '{record.account_name}' - Account does not exist in the system"
                )
                continue

            try:
                # One savepoint per row
                with db.begin_nested():
                    self._upsert_balance(
                        db, existing, account, year, month, record, uploaded_by, uploaded_at
                    )
                processed += 1
            except SQLAlchemyError as e:
                self._forget_unsaved(existing, account.id)
                skipped += 1
                logger.error(f"Failed to upsert balance for {record.account_name}: {e}")
                outcome.add_error(f"Failed to process account '{record.account_name}': {e}")

        # Single transaction boundary for the batch
        db.commit()

        outcome.processed_records = processed
        outcome.skipped_records = skipped
        return invalid_accounts

    @staticmethod
    def _load_account_lookup(db: Session) -> dict[str, Account]:
        """Active accounts keyed by case-folded name."""
        accounts = db.execute(
            select(Account)
            .where(Account.is_active == True)  # noqa: E712
            .order_by(Account.name)
        ).scalars().all()
        return {account.name.casefold(): account for account in accounts}

    @staticmethod
    def _load_period_records(db: Session, year: int, month: int) -> dict[int, BalanceRecord]:
        """Existing balance records for the period, keyed by account id."""
        rows = db.execute(
            select(BalanceRecord).where(
                BalanceRecord.year == year,
                BalanceRecord.month == month,
            )
        ).scalars().all()
        return {row.account_id: row for row in rows}

    @staticmethod
    def _forget_unsaved(existing: dict[int, BalanceRecord], account_id: int) -> None:
        """Drop a row whose insert was rolled back so a later line can retry it."""
        balance = existing.get(account_id)
        if balance is not None and inspect(balance).transient:
            del existing[account_id]

    @staticmethod
    def _upsert_balance(
            db: Session,
            existing: dict[int, BalanceRecord],
            account: Account,
            year: int,
            month: int,
            record: UploadCandidateRecord,
            uploaded_by: int,
            uploaded_at: datetime,
    ) -> BalanceRecord:
        """
        Update the period's record for the account or insert a new one.

        `existing` also receives new rows, so a name repeated within one
        file updates the pending row instead of inserting a duplicate.
        """
        balance = existing.get(account.id)

        if balance is not None:
            balance.amount = record.amount
            balance.uploaded_by = uploaded_by
            balance.uploaded_at = uploaded_at
            return balance

        balance = BalanceRecord(
            account_id=account.id,
            year=year,
            month=month,
            amount=record.amount,
            uploaded_by=uploaded_by,
            uploaded_at=uploaded_at,
        )
        db.add(balance)
        existing[account.id] = balance
        return balance

    # =========================================================================
    # RESULT MESSAGE
    # =========================================================================

    @staticmethod
    def _compose_message(outcome: UploadOutcome, invalid_accounts: list[str]) -> None:
        processed = outcome.processed_records
        skipped = outcome.skipped_records

        outcome.success = processed > 0

        if processed > 0 and skipped > 0:
            message = (
                f"Partially successful: {processed} records processed, "
                f"{skipped} records skipped"
            )
            if invalid_accounts:
                preview = invalid_accounts[:INVALID_ACCOUNTS_PREVIEW_LIMIT]
                message += f". Invalid accounts found: {', '.join(preview)}"
                remaining = len(invalid_accounts) - len(preview)
                if remaining > 0:
                    message += f" and {remaining} more"
            outcome.message = message
        elif processed > 0:
            outcome.message = f"Successfully processed {processed} records"
        else:
            outcome.message = (
                f"No records processed. {skipped} records skipped due to invalid accounts"
            )
