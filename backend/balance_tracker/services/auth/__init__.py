"""
Authentication and authorization services.

This module provides:
- Password hashing and verification (bcrypt)
- JWT access token creation and validation
- Login (AuthService)
- Role-based capability checks (policy)

Usage:
    from balance_tracker.services.auth import AuthService, JWTHandler

    token = AuthService().login(db, "admin", "Admin@123")
    payload = JWTHandler.validate_access_token(token.access_token)
"""

from balance_tracker.services.auth.password import PasswordService
from balance_tracker.services.auth.jwt_handler import JWTHandler, IssuedToken
from balance_tracker.services.auth.policy import (
    Capability,
    Principal,
    ensure_allowed,
    is_allowed,
)
from balance_tracker.services.auth.service import AuthService, AccessToken

__all__ = [
    "PasswordService",
    "JWTHandler",
    "IssuedToken",
    "AuthService",
    "AccessToken",
    "Capability",
    "Principal",
    "ensure_allowed",
    "is_allowed",
]
