# backend/balance_tracker/services/upload/parsers/amounts.py
"""
Culture-invariant amount parsing.

Amounts are read as decimal.Decimal, never float, so repeated uploads of
the same figure store exactly the same value.

Accepted:
    "85000.00", "-1200", "+15", "1,234.56", "  42.5  ", ".75"

Rejected:
    "", "abc", "$100", "1.2.3", "1e5", "(100)", ",100"
"""

import re
from decimal import Decimal, InvalidOperation

# Optional sign, digits with optional comma group separators, optional fraction
_AMOUNT_PATTERN = re.compile(r"^[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)$")


def parse_amount(text: str) -> Decimal:
    """
    Parse amount text into a Decimal.

    Args:
        text: Raw amount text from a file cell or field

    Returns:
        Parsed amount

    Raises:
        ValueError: If the text is empty or not a plain decimal number
    """
    candidate = text.strip() if text else ""
    if not candidate or not _AMOUNT_PATTERN.match(candidate):
        raise ValueError(f"Invalid amount format: {text}")

    try:
        return Decimal(candidate.replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Invalid amount format: {text}")


def is_decimal(text: str) -> bool:
    """Return True if the text parses as an amount."""
    try:
        parse_amount(text)
    except ValueError:
        return False
    return True
