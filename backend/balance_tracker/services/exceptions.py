# backend/balance_tracker/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The application layer (main.py) maps them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidFileFormatError
    │   └── BusinessRuleViolationError
    ├── NotFoundError
    │   └── AccountNotFoundError
    ├── DuplicateError
    │   └── DuplicateAccountError
    ├── UploadCancelledError
    ├── AuthenticationError
    │   ├── InvalidCredentialsError
    │   ├── TokenExpiredError
    │   └── UserInactiveError
    └── AuthorizationError
        └── PermissionDeniedError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when caller input is out of range or has the wrong shape.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidFileFormatError(ValidationError):
    """Raised when an uploaded file cannot be interpreted at all."""

    def __init__(self, message: str, filename: str | None = None) -> None:
        self.filename = filename
        super().__init__(message, field="file")


class BusinessRuleViolationError(ValidationError):
    """Raised when a request is well formed but breaks a business rule."""


# =============================================================================
# NOT FOUND / DUPLICATE ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Account")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class AccountNotFoundError(NotFoundError):
    """Raised when an account cannot be found by id or name."""

    def __init__(self, account: int | str) -> None:
        super().__init__(
            f"Account '{account}' not found",
            resource_type="Account",
            resource_id=account,
        )


class DuplicateError(ServiceError):
    """Raised when creating a resource that already exists."""

    def __init__(self, message: str, resource_type: str | None = None) -> None:
        self.resource_type = resource_type
        super().__init__(message)


class DuplicateAccountError(DuplicateError):
    """Raised when an account name is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Account '{name}' already exists", resource_type="Account")


# =============================================================================
# UPLOAD
# =============================================================================


class UploadCancelledError(ServiceError):
    """Raised when an upload is cancelled between rows."""

    def __init__(self, message: str = "Upload was cancelled") -> None:
        super().__init__(message)


# =============================================================================
# AUTHENTICATION / AUTHORIZATION
# =============================================================================


class AuthenticationError(ServiceError):
    """Base exception for failed authentication (HTTP 401)."""


class InvalidCredentialsError(AuthenticationError):
    """Raised for an unknown username, wrong password or an invalid token."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a bearer token is past its expiry."""

    def __init__(self, message: str = "Token has expired", token_type: str = "access") -> None:
        self.token_type = token_type
        super().__init__(message)


class UserInactiveError(AuthenticationError):
    """Raised when a deactivated principal tries to log in."""

    def __init__(self, message: str = "Account is inactive") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Base exception for authenticated callers lacking rights (HTTP 403)."""


class PermissionDeniedError(AuthorizationError):
    """
    Raised when the caller's roles do not grant a capability.

    Attributes:
        capability: Name of the capability that was required
    """

    def __init__(self, capability: str | None = None, message: str | None = None) -> None:
        self.capability = capability
        super().__init__(message or "You do not have permission to perform this action")


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidFileFormatError",
    "BusinessRuleViolationError",
    # Not Found / Duplicate
    "NotFoundError",
    "AccountNotFoundError",
    "DuplicateError",
    "DuplicateAccountError",
    # Upload
    "UploadCancelledError",
    # Auth
    "AuthenticationError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "UserInactiveError",
    "AuthorizationError",
    "PermissionDeniedError",
]
