"""Closed role catalog and authority labels.

Roles are the permission tiers a user can hold. The set is fixed: rows in the
``roles`` table are seeded from this enumeration and never created by end users.
"""

from collections.abc import Iterable
from enum import StrEnum


class RoleName(StrEnum):
    """Canonical role names, stored lower-case in the ``roles`` table."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


DEFAULT_ROLE = RoleName.USER

VALID_ROLES: frozenset[str] = frozenset(role.value for role in RoleName)

AUTHORITY_PREFIX = "ROLE_"


class UnknownRoleError(ValueError):
    """Raised when a requested role name is outside the catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.message = f"Role {name} does not exist!"
        super().__init__(self.message)


def parse_role_names(names: Iterable[str] | None) -> list[RoleName]:
    """
    Resolve requested role names to catalog members.

    None or an empty list yields the default role. Duplicates collapse, first
    occurrence wins. Raises UnknownRoleError for the first unknown name.
    """
    if not names:
        return [DEFAULT_ROLE]
    resolved: list[RoleName] = []
    for name in names:
        if name not in VALID_ROLES:
            raise UnknownRoleError(name)
        role = RoleName(name)
        if role not in resolved:
            resolved.append(role)
    return resolved


def authority_for(name: str) -> str:
    """External label for a role: 'admin' -> 'ROLE_ADMIN'."""
    return AUTHORITY_PREFIX + name.upper()


def authorities_for(names: Iterable[str]) -> list[str]:
    """Sorted authority labels for a user's role names."""
    return [authority_for(n) for n in sorted(set(names))]
