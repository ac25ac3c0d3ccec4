# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-guildhall")

from guildhall.api.v1.dependencies import get_image_storage
from guildhall.core.security import create_access_token, hash_password
from guildhall.db.session import Base
from guildhall.db.session import get_db as app_get_session
from guildhall.main import create_app
from guildhall.models import Comment, Post, User
from guildhall.services import accounts
from guildhall.services.cache import ListingCache
from guildhall.services.storage import UploadedImage

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "password123"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app(engine: Engine) -> FastAPI:
    return create_app(engine=engine, cache=ListingCache(None))


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def password_hash() -> str:
    """Hash the shared test password once; bcrypt is deliberately slow."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture()
def make_user(db_session: Session, password_hash: str) -> Callable[..., User]:
    """Return a factory creating persisted users holding the given roles."""

    def _make_user(
        username: str | None = None,
        roles: tuple[str, ...] = ("user",),
        is_active: bool = True,
    ) -> User:
        username = username or f"user{next(_USER_COUNTER)}"
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            display_name=username.title(),
            is_active=is_active,
        )
        db_session.add(user)
        accounts.set_roles(db_session, user, roles)
        db_session.commit()
        return user

    return _make_user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.username, user.role_names)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a helper building bearer headers for any user."""
    return auth_headers


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Primary regular user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Second regular user."""
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin", roles=("user", "admin"))


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Authorization headers for the second test user."""
    return auth_headers(other_user)


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    def _make_post(author: User, title: str = "Patch notes", **fields: Any) -> Post:
        post = Post(
            user_id=author.id,
            title=title,
            content=fields.pop("content", "Balance changes for the new season"),
            category=fields.pop("category", "discussion"),
            tags=fields.pop("tags", []),
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """A live post authored by the primary test user."""
    return make_post(test_user)


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    """Insert a comment directly, keeping the post's comment_count in step."""

    def _make_comment(
        post: Post, author: User, content: str = "Nice write-up", **fields: Any
    ) -> Comment:
        comment = Comment(post_id=post.id, user_id=author.id, content=content, **fields)
        db_session.add(comment)
        post.comment_count += 1
        db_session.commit()
        return comment

    return _make_comment


@pytest.fixture()
def test_comment(
    make_comment: Callable[..., Comment], test_post: Post, other_user: User
) -> Comment:
    """A comment by the second user on the primary user's post."""
    return make_comment(test_post, other_user)


class FakeImageStorage:
    """In-memory stand-in for the image storage collaborator."""

    def __init__(self) -> None:
        self.uploaded: dict[str, bytes] = {}
        self.deleted: list[str] = []

    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> UploadedImage:
        public_id = f"guildhall/{filename.rsplit('.', 1)[0]}"
        self.uploaded[public_id] = content
        return UploadedImage(
            url=f"https://images.test/{public_id}.png", public_id=public_id, width=64, height=64
        )

    async def delete_image(self, public_id: str) -> None:
        self.deleted.append(public_id)


@pytest.fixture()
def fake_storage(app: FastAPI) -> Iterator[FakeImageStorage]:
    storage = FakeImageStorage()
    app.dependency_overrides[get_image_storage] = lambda: storage
    try:
        yield storage
    finally:
        app.dependency_overrides.pop(get_image_storage, None)
