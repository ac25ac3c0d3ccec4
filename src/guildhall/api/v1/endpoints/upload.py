# src/guildhall/api/v1/endpoints/upload.py
"""Image upload endpoints backed by the image storage collaborator.

Uploaded images are not tied to an owner, so both routes are admin-only.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, File, UploadFile

from guildhall.api.v1.dependencies import AdminUserDep, ImageStorageDep
from guildhall.core.errors import ValidationError
from guildhall.core.settings import settings
from guildhall.schemas.common import success
from guildhall.schemas.upload import UploadedImageResponse
from guildhall.services.storage import ALLOWED_IMAGE_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/image")
async def upload_image(
    current_user: AdminUserDep,
    storage: ImageStorageDep,
    file: UploadFile = File(...),
) -> dict[str, Any]:
    """Upload one image (jpeg, png, gif or webp) and return its public URL."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Allowed: jpeg, png, gif, webp")
    data = await file.read(settings.max_upload_bytes + 1)
    if not data:
        raise ValidationError("File is empty")
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(
            f"File is too large (max {settings.max_upload_bytes // (1024 * 1024)}MB)"
        )

    image = await storage.upload_image(file.filename or "upload", data, file.content_type)
    logger.info("User %s uploaded image %s", current_user.user_id, image.public_id)
    return success(UploadedImageResponse(**asdict(image)), "Image uploaded successfully")


@router.delete("/image/{public_id:path}")
async def delete_image(
    public_id: str, current_user: AdminUserDep, storage: ImageStorageDep
) -> dict[str, Any]:
    await storage.delete_image(public_id)
    logger.info("User %s deleted image %s", current_user.user_id, public_id)
    return success(None, "Image deleted successfully")
