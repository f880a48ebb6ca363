# backend/balance_tracker/services/upload/__init__.py
"""
Balance upload package.

Usage:
    from balance_tracker.services.upload import BalanceUploadService, build_default_registry

    service = BalanceUploadService(build_default_registry())
    outcome = service.execute(db, file, "balances.csv", size, 2025, 8, user.id)

Architecture:
    upload/
    ├── __init__.py          # This file - main exports
    ├── types.py             # UploadCandidateRecord, UploadOutcome
    ├── service.py           # BalanceUploadService (orchestration)
    └── parsers/             # File format parsers + registry
        ├── base.py          # Abstract parser interface
        ├── amounts.py       # Decimal amount parsing
        ├── delimited.py     # CSV / TSV / TXT
        └── spreadsheet.py   # XLSX / XLS
"""

from balance_tracker.services.upload.parsers import (
    BalanceFileParser,
    DelimitedFileParser,
    SpreadsheetFileParser,
    ParserRegistry,
    UnsupportedFileTypeError,
    build_default_registry,
)
from balance_tracker.services.upload.service import BalanceUploadService
from balance_tracker.services.upload.types import UploadCandidateRecord, UploadOutcome

__all__ = [
    # Service
    "BalanceUploadService",
    "UploadOutcome",
    "UploadCandidateRecord",
    # Parsers
    "BalanceFileParser",
    "DelimitedFileParser",
    "SpreadsheetFileParser",
    "ParserRegistry",
    "build_default_registry",
    # Exceptions
    "UnsupportedFileTypeError",
]
