# tests/test_access.py
"""Unit tests for ownership and role checks."""

import pytest

from guildhall.core.errors import AuthenticationError, AuthorizationError
from guildhall.core.security import TokenClaims
from guildhall.services.access import can_modify, ensure_admin, ensure_can_modify, is_admin


def _claims(user_id: int, *roles: str) -> TokenClaims:
    return TokenClaims(
        user_id=user_id, username=f"user{user_id}", roles=roles or ("user",),
        issued_at=0, expires_at=0,
    )


def test_owner_can_modify():
    assert can_modify(5, _claims(5))


def test_stranger_cannot_modify():
    assert not can_modify(5, _claims(6))


@pytest.mark.parametrize("role", ["admin", "super_admin"])
def test_admin_roles_bypass_ownership(role):
    assert is_admin(_claims(1, role))
    assert can_modify(5, _claims(1, role))


def test_moderator_is_not_admin():
    assert not is_admin(_claims(1, "moderator"))
    assert not can_modify(5, _claims(1, "moderator"))


def test_anonymous_cannot_modify():
    assert not can_modify(5, None)
    assert not is_admin(None)


def test_ensure_can_modify_raises_typed_errors():
    with pytest.raises(AuthenticationError):
        ensure_can_modify(5, None)
    with pytest.raises(AuthorizationError) as excinfo:
        ensure_can_modify(5, _claims(6), "nope")
    assert excinfo.value.message == "nope"
    ensure_can_modify(5, _claims(5))


def test_ensure_admin():
    with pytest.raises(AuthenticationError):
        ensure_admin(None)
    with pytest.raises(AuthorizationError):
        ensure_admin(_claims(1))
    admin = _claims(1, "admin")
    assert ensure_admin(admin) is admin
