# backend/balance_tracker/schemas/validators.py
"""
Period (year, month) validation shared by every endpoint that takes one.

Two policies:
- Query policy: any month of the years 2000 .. next year may be browsed.
- Upload policy: balances cannot be uploaded for a future period.

Both run before any service is called and raise service exceptions that
the global handlers turn into HTTP 400 responses.
"""

from datetime import date

from balance_tracker.services.constants import MIN_BALANCE_YEAR, MAX_QUERY_YEARS_AHEAD
from balance_tracker.services.exceptions import BusinessRuleViolationError, ValidationError


def _today(today: date | None) -> date:
    return today or date.today()


def validate_month(month: int) -> int:
    """
    Raises:
        ValidationError: If month is outside 1..12
    """
    if month < 1 or month > 12:
        raise ValidationError("Invalid month", field="month")
    return month


def validate_query_period(year: int, month: int, today: date | None = None) -> tuple[int, int]:
    """
    Validate a period used to browse balances.

    Args:
        year: Must be within [2000, current year + 1]
        month: Must be within [1, 12]
        today: Reference date (defaults to today)

    Returns:
        The validated (year, month)

    Raises:
        ValidationError: "Invalid year" or "Invalid month"
    """
    max_year = _today(today).year + MAX_QUERY_YEARS_AHEAD

    if year < MIN_BALANCE_YEAR or year > max_year:
        raise ValidationError("Invalid year", field="year")

    validate_month(month)
    return year, month


def validate_upload_period(year: int, month: int, today: date | None = None) -> tuple[int, int]:
    """
    Validate the period an upload is recorded against.

    Checks, in order: year not before 2000, year not in the future, month
    not in the future for the current year, month within 1..12.

    Raises:
        BusinessRuleViolationError: For periods before 2000 or in the future
        ValidationError: "Invalid month"
    """
    current = _today(today)

    if year < MIN_BALANCE_YEAR:
        raise BusinessRuleViolationError(f"Year cannot be before {MIN_BALANCE_YEAR}", field="year")

    if year > current.year:
        raise BusinessRuleViolationError("Cannot upload balance data for future years", field="year")

    if year == current.year and month > current.month:
        raise BusinessRuleViolationError("Cannot upload balance data for future months", field="month")

    validate_month(month)
    return year, month
