"""Database engine and session configuration.

There is no module-level engine: the process entry point
(:func:`guildhall.main.create_app`, the CLI scripts) builds one with
:func:`build_engine` and owns its lifecycle. Request handlers receive a
session through the :func:`get_db` dependency, which draws from the session
factory stored on the application state.
"""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from guildhall.core.settings import settings, to_psycopg_url


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import guildhall.models  # noqa: E402,F401


def build_engine(url: str | None = None, *, echo: bool | None = None) -> Engine:
    """Create an engine for ``url`` (defaults to the configured database)."""
    database_url = to_psycopg_url(url) if url else settings.database_url_sync
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=settings.sql_debug if echo is None else echo,
        connect_args=connect_args,
    )


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``bind``."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    session_factory: sessionmaker[Session] = request.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine) -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=bind)


def drop_tables(bind: Engine) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=bind)
