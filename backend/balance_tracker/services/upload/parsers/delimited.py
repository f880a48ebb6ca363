# backend/balance_tracker/services/upload/parsers/delimited.py
"""
Delimited text parser (CSV, TSV, TXT).

Expected layout, one account per line:
    Account,Amount
    R&D,85000.00
    Canteen,"12,500.75"

- The delimiter is fixed per parser instance (',' or '\\t').
- Each physical line is split on its own with the csv module, so quoted
  fields may contain the delimiter but never span lines. A stray quote
  damages only its own line. Surrounding whitespace and quote characters
  are stripped.
- Blank lines are ignored.
- The first non-blank line is treated as a header only when its second
  field is not a number. A data file whose first row has a non-numeric
  amount loses that row; a header whose second column is numeric is read
  as data.
- Columns beyond the second are ignored.
"""

import csv
import logging
import threading
from typing import BinaryIO, Iterable

from balance_tracker.services.upload.parsers.amounts import is_decimal
from balance_tracker.services.upload.parsers.base import BalanceFileParser, RowParseError
from balance_tracker.services.upload.types import UploadCandidateRecord, UploadOutcome

logger = logging.getLogger(__name__)

EMPTY_FILE_MESSAGE = "No valid records found in the file"


def _clean(value: str) -> str:
    return value.strip().strip('"').strip()


class DelimitedFileParser(BalanceFileParser):
    """
    Parser for delimiter-separated balance files.

    Example:
        parser = DelimitedFileParser(",", (".csv", ".txt"))
        records = parser.parse(io.BytesIO(b"R&D,100\\n"), UploadOutcome())
    """

    def __init__(
            self,
            delimiter: str,
            extensions: Iterable[str],
            name: str | None = None,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")

        self._delimiter = delimiter
        self._extensions = tuple(ext.lower() for ext in extensions)
        self._name = name or ("TSV" if delimiter == "\t" else "CSV")

    @property
    def name(self) -> str:
        return self._name

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return self._extensions

    @property
    def delimiter(self) -> str:
        return self._delimiter

    def parse(
            self,
            file: BinaryIO,
            outcome: UploadOutcome,
            cancel_event: threading.Event | None = None,
    ) -> list[UploadCandidateRecord]:
        records: list[UploadCandidateRecord] = []

        try:
            content = self._read_file_content(file)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read delimited file: {e}")
            outcome.add_error(f"Error reading file: {e}")
            outcome.success = False
            return records

        header_checked = False

        for line_number, line in enumerate(content.splitlines(), start=1):
            self._raise_if_cancelled(cancel_event)

            if not line.strip():
                continue

            try:
                fields = self._split_line(line)
            except csv.Error as e:
                outcome.add_error(f"Error parsing line {line_number}: {e}")
                continue

            if not header_checked:
                header_checked = True
                if self._is_header(fields):
                    logger.debug(f"Skipping header line {line_number}: {fields}")
                    continue

            try:
                records.append(self._parse_fields(fields, line_number))
            except RowParseError as e:
                outcome.add_error(f"Error parsing line {line_number}: {e}")

        logger.info(
            f"Parsed {self._name} file: {len(records)} records, "
            f"{outcome.error_count} errors"
        )
        return self._finish(records, outcome, EMPTY_FILE_MESSAGE)

    def _split_line(self, line: str) -> list[str]:
        """
        Raises:
            csv.Error: If the line cannot be tokenized
        """
        return next(csv.reader([line], delimiter=self._delimiter), [])

    def _parse_fields(self, fields: list[str], line_number: int) -> UploadCandidateRecord:
        if len(fields) < 2:
            raise RowParseError("Expected at least 2 columns: Account Name, Amount")

        return self._build_record(_clean(fields[0]), _clean(fields[1]), line_number)

    @staticmethod
    def _is_header(fields: list[str]) -> bool:
        if len(fields) < 2:
            return True
        return not is_decimal(_clean(fields[1]))

    @staticmethod
    def _read_file_content(file: BinaryIO) -> str:
        """
        Read and decode file content.

        Tries UTF-8 (with or without BOM), falls back to Latin-1.
        """
        raw_content = file.read()

        try:
            return raw_content.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        # Latin-1 never fails, but may produce garbage
        logger.warning("File is not UTF-8, falling back to Latin-1 encoding")
        return raw_content.decode("latin-1")
