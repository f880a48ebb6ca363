# backend/balance_tracker/services/upload/parsers/spreadsheet.py
"""
Excel parser (.xlsx via openpyxl, .xls via xlrd).

Only the first worksheet and its first two columns are read:

    |   A           |   B        |
    | Account Name  | Amount     |   <- optional header row
    | R&D           | 85000      |
    | Canteen       | 12500.75   |

- Row 1 is a header when column A mentions "account" or "name"
  (case-insensitive) and column B is not a number.
- Rows where both columns are blank are ignored.
- Numeric cells are converted without going through float formatting,
  so 12500.75 stays 12500.75.
"""

import io
import logging
import threading
from decimal import Decimal
from typing import Any, BinaryIO

import pandas as pd

from balance_tracker.services.upload.parsers.amounts import is_decimal
from balance_tracker.services.upload.parsers.base import BalanceFileParser, RowParseError
from balance_tracker.services.upload.types import UploadCandidateRecord, UploadOutcome

logger = logging.getLogger(__name__)

EMPTY_FILE_MESSAGE = "No valid records found in the Excel file"
NO_WORKSHEETS_MESSAGE = "Excel file contains no worksheets"
EMPTY_WORKSHEET_MESSAGE = "Excel worksheet is empty"

HEADER_KEYWORDS = ("account", "name")


def _cell_text(value: Any) -> str:
    """Render a cell value as trimmed text ('' for empty cells)."""
    if value is None:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        # repr() gives the shortest round-tripping form; "f" avoids exponents
        return format(Decimal(repr(value)), "f")
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


class SpreadsheetFileParser(BalanceFileParser):
    """Parser for Excel workbooks."""

    @property
    def name(self) -> str:
        return "Excel"

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".xlsx", ".xls")

    def parse(
            self,
            file: BinaryIO,
            outcome: UploadOutcome,
            cancel_event: threading.Event | None = None,
    ) -> list[UploadCandidateRecord]:
        records: list[UploadCandidateRecord] = []

        try:
            frame = self._read_first_sheet(file)
        except Exception as e:
            logger.error(f"Could not read Excel file: {e}", exc_info=True)
            outcome.add_error(f"Error reading Excel file: {e}")
            outcome.success = False
            return records

        if frame is None:
            outcome.add_error(NO_WORKSHEETS_MESSAGE)
            outcome.success = False
            return records

        if frame.empty:
            outcome.add_error(EMPTY_WORKSHEET_MESSAGE)
            outcome.success = False
            return records

        rows = [self._row_cells(frame, index) for index in range(len(frame.index))]

        start = 1 if self._is_header(*rows[0]) else 0
        if start:
            logger.debug(f"Skipping Excel header row: {rows[0]}")

        for index in range(start, len(rows)):
            self._raise_if_cancelled(cancel_event)
            row_number = index + 1
            account_text, amount_text = rows[index]

            if not account_text and not amount_text:
                continue

            try:
                records.append(self._build_record(account_text, amount_text, row_number))
            except RowParseError as e:
                outcome.add_error(f"Error parsing row {row_number}: {e}")

        logger.info(
            f"Parsed Excel file: {len(records)} records, {outcome.error_count} errors"
        )
        return self._finish(records, outcome, EMPTY_FILE_MESSAGE)

    @staticmethod
    def _read_first_sheet(file: BinaryIO) -> pd.DataFrame | None:
        """
        Load the first worksheet without a header row.

        Returns:
            DataFrame of raw cell values, or None if the workbook has no sheets
        """
        buffer = io.BytesIO(file.read())

        with pd.ExcelFile(buffer) as workbook:
            if not workbook.sheet_names:
                return None
            return workbook.parse(
                workbook.sheet_names[0],
                header=None,
                dtype=object,
            )

    @staticmethod
    def _row_cells(frame: pd.DataFrame, index: int) -> tuple[str, str]:
        row = frame.iloc[index]
        account = _cell_text(row.iloc[0]) if len(row) > 0 else ""
        amount = _cell_text(row.iloc[1]) if len(row) > 1 else ""
        return account, amount

    @staticmethod
    def _is_header(account_text: str, amount_text: str) -> bool:
        label = account_text.lower()
        mentions_account = any(keyword in label for keyword in HEADER_KEYWORDS)
        return mentions_account and not is_decimal(amount_text)
