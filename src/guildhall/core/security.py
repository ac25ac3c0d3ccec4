"""Session tokens and password hashing.

Tokens are self-contained HS256 JWTs carrying the caller's id, username and
role names as they were when the token was issued. Nothing is stored
server-side, so role changes and deactivation only take effect once the
token expires.
"""
from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from guildhall.core.settings import settings

ADMIN_ROLES = frozenset({"admin", "super_admin"})

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded identity of an authenticated caller."""

    user_id: int
    username: str
    roles: tuple[str, ...]
    issued_at: int
    expires_at: int

    @property
    def is_admin(self) -> bool:
        return bool(ADMIN_ROLES.intersection(self.roles))

    # Lets ownership checks read ``user.id`` the same way for claims and ORM users.
    @property
    def id(self) -> int:
        return self.user_id


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    username: str,
    roles: Iterable[str],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token.

    Args:
        user_id: Primary key of the user.
        username: Username at issuance time.
        roles: Role names granted at issuance time.
        expires_delta: Lifetime override; defaults to the configured lifetime.

    Returns:
        The encoded token (``header.payload.signature``).
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    issued_at = int(time.time())
    to_encode: dict[str, Any] = {
        "user_id": int(user_id),
        "username": username,
        "roles": sorted(set(roles)),
        "iat": issued_at,
        "exp": issued_at + int(lifetime.total_seconds()),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def _roles_from_payload(payload: dict[str, Any]) -> tuple[str, ...] | None:
    roles = payload.get("roles")
    if roles is None:
        # Tokens issued before role grants existed only carried a flag.
        return ("admin",) if payload.get("is_admin") is True else ("user",)
    if not isinstance(roles, list) or not all(isinstance(role, str) for role in roles):
        return None
    return tuple(roles)


def verify_access_token(token: str | None) -> TokenClaims | None:
    """Decode and validate an access token.

    Returns None for anything that is not a well-formed, correctly signed,
    unexpired token. This function never raises.
    """
    if not token or token.count(".") != 2:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    user_id = payload.get("user_id")
    username = payload.get("username")
    expires_at = payload.get("exp")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not isinstance(username, str) or not isinstance(expires_at, int):
        return None
    if expires_at <= int(time.time()):
        return None

    roles = _roles_from_payload(payload)
    if roles is None:
        return None

    return TokenClaims(
        user_id=user_id,
        username=username,
        roles=roles,
        issued_at=int(payload.get("iat", 0)),
        expires_at=expires_at,
    )
