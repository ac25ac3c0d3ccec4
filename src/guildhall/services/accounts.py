"""Account registration, login, role grants and profile data."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import (
    AuthenticationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from guildhall.core.security import create_access_token, hash_password, verify_password
from guildhall.db.time import utcnow
from guildhall.models.comment import Comment
from guildhall.models.engagement import PostBookmark
from guildhall.models.post import Post
from guildhall.models.user import DEFAULT_ROLES, ROLE_USER, Role, User, UserRole
from guildhall.repositories.query import count_rows, fetch_page
from guildhall.repositories.user_repo import UserFilters, build_user_query

logger = logging.getLogger(__name__)

_UNPROCESSABLE = status.HTTP_422_UNPROCESSABLE_ENTITY
MIN_PASSWORD_LENGTH = 6


@dataclass
class ProfileStatistics:
    post_count: int
    comment_count: int
    likes_received: int
    bookmark_count: int


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to %s", action, exc_info=True)
        raise StorageError(f"Failed to {action}") from exc


def ensure_roles(db: Session) -> dict[str, Role]:
    """Create any missing default roles and return all roles by name."""
    existing = {role.name: role for role in db.execute(select(Role)).scalars()}
    for name, description in DEFAULT_ROLES.items():
        if name not in existing:
            role = Role(name=name, description=description)
            db.add(role)
            existing[name] = role
    db.flush()
    return existing


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def set_roles(db: Session, user: User, role_names: Iterable[str]) -> None:
    """Replace the user's grant rows with exactly ``role_names``.

    Raises:
        ValidationError: (422) A role name is unknown.
    """
    wanted = set(role_names)
    roles = ensure_roles(db)
    unknown = sorted(wanted - roles.keys())
    if unknown:
        raise ValidationError(
            "Unknown role",
            status_code=_UNPROCESSABLE,
            details={"roles": ", ".join(unknown)},
        )
    user.grants = [
        grant for grant in user.grants if grant.role.name in wanted
    ]
    held = {grant.role.name for grant in user.grants}
    for name in sorted(wanted - held):
        user.grants.append(UserRole(role=roles[name]))


def register(
    db: Session,
    *,
    username: str | None,
    email: str | None,
    password: str | None,
    display_name: str | None = None,
) -> User:
    """Create an account holding the ``user`` role.

    Raises:
        ValidationError: (422) Missing fields, short password, or
            a username/email already in use. ``details`` names the fields.
    """
    username = (username or "").strip()
    email = (email or "").strip().lower()
    errors: dict[str, str] = {}
    if not username:
        errors["username"] = "This field is required"
    if not email:
        errors["email"] = "This field is required"
    if not password:
        errors["password"] = "This field is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Must be at least {MIN_PASSWORD_LENGTH} characters"
    if errors:
        raise ValidationError("Validation failed", status_code=_UNPROCESSABLE, details=errors)

    if db.execute(select(User.id).where(User.username == username)).first():
        raise ValidationError(
            "Username already exists",
            status_code=_UNPROCESSABLE,
            details={"username": "This username is already taken"},
        )
    if db.execute(select(User.id).where(User.email == email)).first():
        raise ValidationError(
            "Email already exists",
            status_code=_UNPROCESSABLE,
            details={"email": "This email is already registered"},
        )

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password or ""),
        display_name=(display_name or "").strip() or username,
    )
    db.add(user)
    try:
        set_roles(db, user, [ROLE_USER])
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationError(
            "Username or email already exists", status_code=_UNPROCESSABLE
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create user %s", username, exc_info=True)
        raise StorageError("Failed to create user") from exc
    logger.info("Registered user %s (%s)", user.id, username)
    return user


def authenticate(db: Session, username: str | None, password: str | None) -> User:
    """Check credentials for an active account and stamp ``last_login``.

    Raises:
        ValidationError: (422) Username or password missing.
        AuthenticationError: Unknown user, inactive user or wrong password.
    """
    if not username or not password:
        errors = {}
        if not username:
            errors["username"] = "This field is required"
        if not password:
            errors["password"] = "This field is required"
        raise ValidationError(
            "Username and password are required", status_code=_UNPROCESSABLE, details=errors
        )

    user = db.execute(
        select(User).where(User.username == username.strip())
    ).scalar_one_or_none()
    if user is None or not user.is_active or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", username)
        raise AuthenticationError("Invalid username or password", code="INVALID_CREDENTIALS")

    user.last_login = utcnow()
    _commit(db, "record login")
    return user


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.username, user.role_names)


def update_profile(
    db: Session,
    user: User,
    *,
    display_name: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
) -> User:
    if display_name is not None:
        user.display_name = display_name.strip() or user.username
    if bio is not None:
        user.bio = bio
    if avatar_url is not None:
        user.avatar_url = avatar_url or None
    _commit(db, "update profile")
    return user


def profile_stats(db: Session, user_id: int) -> ProfileStatistics:
    post_count = db.execute(
        select(func.count(Post.id)).where(Post.user_id == user_id, Post.is_deleted.is_(False))
    ).scalar_one()
    comment_count = db.execute(
        select(func.count(Comment.id)).where(
            Comment.user_id == user_id, Comment.is_deleted.is_(False)
        )
    ).scalar_one()
    likes_received = db.execute(
        select(func.coalesce(func.sum(Post.like_count), 0)).where(
            Post.user_id == user_id, Post.is_deleted.is_(False)
        )
    ).scalar_one()
    bookmark_count = db.execute(
        select(func.count()).select_from(PostBookmark).where(PostBookmark.user_id == user_id)
    ).scalar_one()
    return ProfileStatistics(
        post_count=int(post_count),
        comment_count=int(comment_count),
        likes_received=int(likes_received),
        bookmark_count=int(bookmark_count),
    )


def list_users(
    db: Session, filters: UserFilters, *, offset: int, limit: int
) -> tuple[list[User], int]:
    stmt = build_user_query(filters)
    return fetch_page(db, stmt, offset=offset, limit=limit), count_rows(db, stmt)


def admin_update_user(
    db: Session,
    user_id: int,
    *,
    is_active: bool | None = None,
    display_name: str | None = None,
    bio: str | None = None,
    roles: list[str] | None = None,
) -> User:
    """Apply an administrator's changes to an account.

    Role changes reach the user's tokens only when they next log in.

    Raises:
        ValidationError: Nothing to update (400) or an unknown role (422).
        NotFoundError: Unknown user.
    """
    if is_active is None and display_name is None and bio is None and roles is None:
        raise ValidationError("No fields to update")
    user = get_user(db, user_id)
    if is_active is not None:
        user.is_active = is_active
    if display_name is not None:
        user.display_name = display_name
    if bio is not None:
        user.bio = bio
    if roles is not None:
        set_roles(db, user, roles)
    _commit(db, "update user")
    logger.info("Updated user %s", user_id)
    return user


def deactivate_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    user.is_active = False
    _commit(db, "deactivate user")
    logger.info("Deactivated user %s", user_id)
    return user
