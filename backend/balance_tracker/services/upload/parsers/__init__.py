# backend/balance_tracker/services/upload/parsers/__init__.py
"""
Balance file parsers and the registry that selects one per extension.

    Extension     Parser
    ---------     ------------------------------
    .csv, .txt    DelimitedFileParser(",")
    .tsv          DelimitedFileParser("\\t")
    .xlsx, .xls   SpreadsheetFileParser

Usage:
    from balance_tracker.services.upload.parsers import build_default_registry

    registry = build_default_registry()
    parser = registry.select(".csv")

    with open("balances.csv", "rb") as f:
        records = parser.parse(f, outcome)

The registry is immutable once built; the upload service receives it
through its constructor.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable

from balance_tracker.services.exceptions import InvalidFileFormatError
from balance_tracker.services.upload.parsers.amounts import parse_amount, is_decimal
from balance_tracker.services.upload.parsers.base import BalanceFileParser, RowParseError
from balance_tracker.services.upload.parsers.delimited import DelimitedFileParser
from balance_tracker.services.upload.parsers.spreadsheet import SpreadsheetFileParser

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class UnsupportedFileTypeError(InvalidFileFormatError):
    """
    Raised when no parser is registered for an extension.

    Attributes:
        extension: The requested extension ('' when missing)
        supported: Extensions the registry can handle
    """

    def __init__(self, extension: str, supported: list[str]) -> None:
        self.extension = extension
        self.supported = supported

        if not extension:
            message = "File extension is required"
        else:
            message = f"File type '{extension}' is not supported"
        super().__init__(message)


# =============================================================================
# REGISTRY
# =============================================================================

class ParserRegistry:
    """
    Read-only mapping from file extension to parser instance.

    Lookups are case-insensitive and expect the leading dot.
    """

    def __init__(self, parsers: Iterable[BalanceFileParser]) -> None:
        mapping: dict[str, BalanceFileParser] = {}
        for parser in parsers:
            for extension in parser.supported_extensions:
                mapping[extension.lower()] = parser
        self._parsers = MappingProxyType(mapping)

    def select(self, extension: str) -> BalanceFileParser:
        """
        Return the parser registered for an extension.

        Raises:
            UnsupportedFileTypeError: If the extension is empty or unknown
        """
        key = (extension or "").strip().lower()
        parser = self._parsers.get(key) if key else None

        if parser is None:
            raise UnsupportedFileTypeError(key, self.supported_extensions)

        logger.debug(f"Selected {parser.name} parser for extension '{key}'")
        return parser

    def select_for_filename(self, filename: str) -> BalanceFileParser:
        return self.select(Path(filename).suffix)

    @property
    def supported_extensions(self) -> list[str]:
        return sorted(self._parsers)

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and extension.lower() in self._parsers


def build_default_registry() -> ParserRegistry:
    """Build the registry for every supported balance file format."""
    return ParserRegistry([
        DelimitedFileParser(",", (".csv", ".txt"), name="CSV"),
        DelimitedFileParser("\t", (".tsv",), name="TSV"),
        SpreadsheetFileParser(),
    ])


__all__ = [
    "BalanceFileParser",
    "RowParseError",
    "DelimitedFileParser",
    "SpreadsheetFileParser",
    "ParserRegistry",
    "UnsupportedFileTypeError",
    "build_default_registry",
    "parse_amount",
    "is_decimal",
]
