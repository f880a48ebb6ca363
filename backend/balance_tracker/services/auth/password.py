"""
Password hashing and verification using bcrypt.

Uses passlib with the bcrypt backend. The cost factor comes from
PASSWORD_HASH_ROUNDS (default 12, about 250ms per hash); the test suite
lowers it to keep fixtures fast.
"""

from passlib.context import CryptContext

from balance_tracker.config import settings


# min_rounds makes needs_rehash() flag hashes made with a lower cost factor
_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
    bcrypt__min_rounds=settings.password_hash_rounds,
)


class PasswordService:
    """
    Stateless bcrypt helpers.

    Example:
        >>> hashed = PasswordService.hash_password("Admin@123")
        >>> PasswordService.verify_password("Admin@123", hashed)
        True
    """

    @staticmethod
    def hash_password(password: str) -> str:
        """Return the bcrypt hash (algorithm, cost and salt included)."""
        return _pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plaintext password against a stored hash.

        Returns False instead of raising for a malformed stored hash.
        """
        try:
            return _pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False

    @staticmethod
    def needs_rehash(hashed_password: str) -> bool:
        """True if the hash was made with weaker settings than the current ones."""
        return _pwd_context.needs_update(hashed_password)
