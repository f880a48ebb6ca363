"""
JWT access token creation and validation.

Access tokens are stateless: nothing is stored in the database. Each token
carries the user's identity and role names, and is bound to the configured
issuer and audience. Signing is symmetric (HS256 by default) with
JWT_SECRET_KEY, which must be at least 32 characters.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from jose import ExpiredSignatureError, JWTError, jwt

from balance_tracker.config import settings
from balance_tracker.services.exceptions import TokenExpiredError, InvalidCredentialsError


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed access token and its metadata."""
    token: str
    expires_at: datetime
    jti: str


class JWTHandler:
    """
    Handles JWT token creation and validation.

    Access tokens contain:
    - sub: User ID (string)
    - unique_name: Username
    - email: User's email
    - roles: Role names, one entry per role
    - jti: Unique token ID
    - iss / aud: Configured issuer and audience
    - iat / exp: Issued-at and expiry timestamps
    - type: "access"
    """

    @staticmethod
    def create_access_token(
        user_id: int,
        username: str,
        email: str,
        roles: Iterable[str],
        expires_delta: timedelta | None = None,
    ) -> IssuedToken:
        """
        Create a signed access token.

        Args:
            user_id: The user's database ID
            username: The user's login name
            email: The user's email address
            roles: Role names granted to the user
            expires_delta: Optional custom lifetime

        Returns:
            IssuedToken with the encoded JWT and its absolute expiry
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        expire = now + expires_delta
        jti = str(uuid.uuid4())

        payload = {
            "sub": str(user_id),
            "unique_name": username,
            "email": email,
            "roles": list(roles),
            "jti": jti,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "iat": now,
            "exp": expire,
            "type": "access",
        }

        token = jwt.encode(
            payload,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        return IssuedToken(token=token, expires_at=expire, jti=jti)

    @staticmethod
    def validate_access_token(token: str) -> dict[str, Any]:
        """
        Validate an access token and return its payload.

        Signature, expiry, issuer and audience are all checked.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidCredentialsError: If the token is invalid or malformed
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
                audience=settings.jwt_audience,
                issuer=settings.jwt_issuer,
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Access token has expired")
        except JWTError as e:
            raise InvalidCredentialsError(f"Invalid token: {e}")

        if payload.get("type") != "access":
            raise InvalidCredentialsError("Invalid token type")

        return payload

    @staticmethod
    def get_token_expiry(token: str) -> datetime | None:
        """
        Read the expiry of a token without verifying it.

        Returns:
            Expiration datetime (UTC) or None if missing or unreadable
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return None

        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)
