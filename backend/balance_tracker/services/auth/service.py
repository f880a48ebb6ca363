"""
Core authentication service.

Handles:
- Login with username/password, returning a signed access token
- Loading the principal behind a validated token

Failed logins never say whether the username or the password was wrong.
An inactive account is reported separately, after the password matched.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from balance_tracker.models import User
from balance_tracker.services.auth.jwt_handler import JWTHandler
from balance_tracker.services.auth.password import PasswordService
from balance_tracker.services.auth.policy import Principal
from balance_tracker.services.exceptions import (
    InvalidCredentialsError,
    UserInactiveError,
)


logger = logging.getLogger(__name__)


@dataclass
class AccessToken:
    """Result of a successful login."""
    access_token: str
    expires_at: datetime
    roles: list[str]
    token_type: str = "bearer"


class AuthService:
    """
    Authentication service.

    Verifies credentials against the users table and issues JWT access tokens.
    """

    def login(self, db: Session, username: str, password: str) -> AccessToken:
        """
        Authenticate a user and issue an access token.

        Args:
            db: Database session
            username: Login name (case-insensitive)
            password: Plain text password

        Returns:
            AccessToken with the JWT, its absolute expiry and the user's roles

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
            UserInactiveError: If the user account is deactivated
        """
        user = self.get_user_by_username(db, username)

        if user is None or not user.hashed_password:
            logger.warning("Login failed: invalid credentials")
            raise InvalidCredentialsError()

        if not PasswordService.verify_password(password, user.hashed_password):
            logger.warning("Login failed: invalid credentials")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login rejected for inactive user id={user.id}")
            raise UserInactiveError()

        if PasswordService.needs_rehash(user.hashed_password):
            user.hashed_password = PasswordService.hash_password(password)
            db.commit()

        roles = user.role_names
        issued = JWTHandler.create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            roles=roles,
        )

        logger.info(f"User logged in: {user.username} (roles={roles})")
        return AccessToken(
            access_token=issued.token,
            expires_at=issued.expires_at,
            roles=roles,
        )

    def get_user_by_username(self, db: Session, username: str) -> User | None:
        return db.execute(
            select(User).where(func.lower(User.username) == username.strip().lower())
        ).scalar_one_or_none()

    def get_principal(self, db: Session, user_id: int) -> Principal | None:
        """
        Load the principal for a user ID.

        Returns:
            Principal, or None if the user does not exist
        """
        user = db.get(User, user_id)
        if user is None:
            return None
        return Principal.from_user(user)
