"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from guildhall.core.errors import AuthenticationError
from guildhall.core.security import TokenClaims, verify_access_token
from guildhall.db.session import get_db
from guildhall.schemas.common import PageParams
from guildhall.services.access import ensure_admin
from guildhall.services.cache import ListingCache
from guildhall.services.storage import CloudinaryStorage, ImageStorage

# Missing credentials are not an error here; require_auth decides.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenClaims | None:
    """Identify the caller from the bearer token, if any.

    Identity comes from the token alone; the database is not consulted, so
    role changes apply from the caller's next login.
    """
    if credentials is None:
        return None
    return verify_access_token(credentials.credentials)


OptionalUserDep = Annotated[TokenClaims | None, Depends(get_current_user_optional)]


def require_auth(user: OptionalUserDep) -> TokenClaims:
    """Get the authenticated caller.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired.
    """
    if user is None:
        raise AuthenticationError()
    return user


CurrentUserDep = Annotated[TokenClaims, Depends(require_auth)]


def require_admin(user: OptionalUserDep) -> TokenClaims:
    """Get the caller, who must hold the admin or super_admin role.

    Raises:
        AuthenticationError: If the caller is anonymous.
        AuthorizationError: If the caller is not an administrator.
    """
    return ensure_admin(user)


AdminUserDep = Annotated[TokenClaims, Depends(require_admin)]


def get_page_params(
    page: Annotated[int | None, Query(description="Page number, starting at 1")] = None,
    limit: Annotated[int | None, Query(description="Items per page (1-100)")] = None,
) -> PageParams:
    return PageParams.clamp(page, limit)


PageDep = Annotated[PageParams, Depends(get_page_params)]


def get_listing_cache(request: Request) -> ListingCache:
    cache: ListingCache | None = getattr(request.app.state, "listing_cache", None)
    return cache or ListingCache(None)


CacheDep = Annotated[ListingCache, Depends(get_listing_cache)]


def get_image_storage() -> ImageStorage:
    """Return the configured image storage.

    Raises:
        UploadUnavailableError: If storage credentials are not configured.
    """
    return CloudinaryStorage.from_settings()


ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]
