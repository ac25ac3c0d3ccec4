"""Ownership and role checks shared by every mutating operation."""
from __future__ import annotations

from typing import Protocol

from guildhall.core.errors import AuthenticationError, AuthorizationError
from guildhall.core.security import ADMIN_ROLES, TokenClaims


class HasRoles(Protocol):
    roles: tuple[str, ...]


def is_admin(user: HasRoles | None) -> bool:
    """True when ``user`` holds the admin or super_admin role."""
    if user is None:
        return False
    return bool(ADMIN_ROLES.intersection(user.roles))


def can_modify(resource_owner_id: int, user: TokenClaims | None) -> bool:
    """Owners may modify their own resources; administrators may modify any."""
    if user is None:
        return False
    return user.user_id == resource_owner_id or is_admin(user)


def ensure_can_modify(
    resource_owner_id: int,
    user: TokenClaims | None,
    message: str = "You do not have permission to modify this resource",
) -> None:
    """Raise unless ``user`` may modify a resource owned by ``resource_owner_id``.

    Raises:
        AuthenticationError: If there is no caller.
        AuthorizationError: If the caller is neither the owner nor an admin.
    """
    if user is None:
        raise AuthenticationError()
    if not can_modify(resource_owner_id, user):
        raise AuthorizationError(message)


def ensure_admin(user: TokenClaims | None) -> TokenClaims:
    if user is None:
        raise AuthenticationError()
    if not is_admin(user):
        raise AuthorizationError("Admin access required")
    return user
