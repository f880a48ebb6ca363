"""
Role-based authorization policy.

Authorization is a plain function of the caller's role set and the
capability an operation needs, so it can be checked (and tested) without
a request:

    if is_allowed(principal.roles, Capability.UPLOAD_BALANCES):
        ...

The HTTP layer applies it through dependencies.require_capability().
"""

import enum
from dataclasses import dataclass
from typing import Iterable

from balance_tracker.models import RoleName, User
from balance_tracker.services.exceptions import PermissionDeniedError


class Capability(str, enum.Enum):
    VIEW_BALANCES = "view_balances"
    VIEW_PERIOD_BALANCES = "view_period_balances"
    UPLOAD_BALANCES = "upload_balances"
    MANAGE_ACCOUNTS = "manage_accounts"


# Role -> capabilities granted. Roles not listed grant nothing.
ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    RoleName.ADMIN: frozenset(Capability),
    RoleName.USER: frozenset({Capability.VIEW_BALANCES}),
}


@dataclass(frozen=True)
class Principal:
    """An authenticated caller."""
    id: int
    username: str
    email: str
    is_active: bool
    roles: frozenset[str]

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            is_active=user.is_active,
            roles=frozenset(user.role_names),
        )

    @property
    def is_admin(self) -> bool:
        return RoleName.ADMIN in self.roles


def is_allowed(roles: Iterable[str], capability: Capability) -> bool:
    """Return True if any of the roles grants the capability."""
    return any(capability in ROLE_CAPABILITIES.get(role, frozenset()) for role in roles)


def ensure_allowed(roles: Iterable[str], capability: Capability) -> None:
    """
    Raises:
        PermissionDeniedError: If none of the roles grants the capability
    """
    if not is_allowed(roles, capability):
        raise PermissionDeniedError(capability=capability.value)
