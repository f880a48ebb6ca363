# backend/balance_tracker/services/constants.py
"""
Centralized constants for the balance tracker services.

Usage:
    from balance_tracker.services.constants import (
        MIN_BALANCE_YEAR,
        RATE_LIMIT_UPLOAD,
    )
"""

# =============================================================================
# PERIODS
# =============================================================================

# Earliest year accepted for uploads and period queries
MIN_BALANCE_YEAR: int = 2000

# Period queries may look one year ahead of the current year
MAX_QUERY_YEARS_AHEAD: int = 1


# =============================================================================
# UPLOAD REPORTING
# =============================================================================

# Number of invalid account names listed in a partial-success message
INVALID_ACCOUNTS_PREVIEW_LIMIT: int = 5


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

# Read endpoints (GET requests)
RATE_LIMIT_DEFAULT: str = "100/minute"

# Write endpoints (POST, PUT, DELETE)
RATE_LIMIT_WRITE: str = "30/minute"

# Balance file uploads parse whole files in the request
RATE_LIMIT_UPLOAD: str = "10/5minutes"

# Monitoring tools poll health endpoints frequently
RATE_LIMIT_HEALTH: str = "300/minute"

# Login - allows retries but prevents brute force
RATE_LIMIT_AUTH_LOGIN: str = "10/minute"
