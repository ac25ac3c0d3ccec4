# src/guildhall/main.py
"""Main entry point for the Guildhall application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from guildhall.api.v1 import (
    admin_router,
    auth_router,
    bookmarks_router,
    comment_likes_router,
    comments_router,
    notifications_router,
    post_likes_router,
    posts_router,
    profile_router,
    reports_router,
    upload_router,
)
from guildhall.core.errors import (
    AppError,
    app_error_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from guildhall.core.settings import settings
from guildhall.db.session import build_engine, build_session_factory
from guildhall.services.cache import ListingCache

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
DESCRIPTION = "Community platform API for posts, comments, engagement and moderation"


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(engine: Engine | None = None, cache: ListingCache | None = None) -> FastAPI:
    """Build the application.

    Args:
        engine: Database engine to serve from; built from settings when omitted.
        cache: Listing cache; built from settings when omitted.

    Returns:
        The configured FastAPI application.
    """
    app = FastAPI(
        title=f"{settings.app_name} API",
        description=DESCRIPTION,
        version=settings.app_version,
        debug=settings.debug,
    )

    engine = engine or build_engine()
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.listing_cache = cache or ListingCache.from_settings()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    for router in (
        auth_router,
        posts_router,
        comments_router,
        post_likes_router,
        comment_likes_router,
        bookmarks_router,
        reports_router,
        profile_router,
        notifications_router,
        upload_router,
        admin_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": f"{settings.app_name} API",
            "version": settings.app_version,
            "description": DESCRIPTION,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    return app


configure_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("guildhall.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
