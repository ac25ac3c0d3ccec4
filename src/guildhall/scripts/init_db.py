"""Prepare the configured database: create it, its tables and the default roles."""
from __future__ import annotations

import argparse
import getpass
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from guildhall.core.errors import AppError
from guildhall.core.settings import settings
from guildhall.db.session import build_engine, build_session_factory, create_tables
from guildhall.models.user import ROLE_SUPER_ADMIN, User
from guildhall.services import accounts


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    Converts SQLAlchemy schemes (postgresql+*) to plain "postgresql".
    """
    uri = (uri or "").strip().strip("'\"")
    if not uri:
        raise ValueError("DATABASE_URL is empty")
    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+"):
        scheme = "postgresql"
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def ensure_database_exists(db_url: str) -> None:
    """Create the Postgres database named in ``db_url`` if it is missing."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"
    admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            print(f"[init_db] created database {target_db}")
        else:
            print(f"[init_db] database {target_db} already exists")


def create_super_admin(db: Session, username: str, email: str, password: str) -> User:
    user = accounts.register(db, username=username, email=email, password=password)
    accounts.admin_update_user(db, user.id, roles=[ROLE_SUPER_ADMIN])
    return user


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the Guildhall database")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    parser.add_argument(
        "--admin-username",
        default=None,
        help="Also create a super_admin account with this username",
    )
    parser.add_argument("--admin-email", default=None, help="Email for the super_admin account")
    args = parser.parse_args(argv)

    url = args.url or settings.database_url_sync
    try:
        if url.startswith(("postgres:", "postgresql")):
            ensure_database_exists(url)
        engine = build_engine(url)
        create_tables(engine)
        with build_session_factory(engine)() as db:
            roles = accounts.ensure_roles(db)
            db.commit()
            print(f"[init_db] roles: {', '.join(sorted(roles))}")
            if args.admin_username:
                email = args.admin_email or f"{args.admin_username}@localhost"
                password = getpass.getpass(f"Password for {args.admin_username}: ")
                user = create_super_admin(db, args.admin_username, email, password)
                print(f"[init_db] created super_admin {user.username} (id {user.id})")
    except (AppError, SQLAlchemyError, psycopg.Error, ValueError) as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print("[init_db] database initialized")


if __name__ == "__main__":
    main()
