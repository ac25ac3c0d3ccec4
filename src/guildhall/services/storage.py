"""Image storage collaborator.

Uploads go to a Cloudinary-compatible HTTP API using signed requests. The
collaborator sits outside the content domain: its failures surface as
``UploadError`` (502) and a missing configuration as
``UploadUnavailableError`` (503).
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from guildhall.core.errors import UploadError, UploadUnavailableError
from guildhall.core.settings import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


@dataclass
class UploadedImage:
    url: str
    public_id: str
    width: int | None = None
    height: int | None = None


class ImageStorage(Protocol):
    async def upload_image(
        self, filename: str, content: bytes, content_type: str
    ) -> UploadedImage: ...

    async def delete_image(self, public_id: str) -> None: ...


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Cloudinary request signature: sha1 over the sorted ``k=v`` pairs followed by the secret."""
    payload = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1((payload + api_secret).encode("utf-8")).hexdigest()


class CloudinaryStorage:
    """Signed-upload client for the Cloudinary REST API."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        folder: str = "guildhall",
        timeout: float = 30.0,
        base_url: str = "https://api.cloudinary.com/v1_1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    @classmethod
    def from_settings(cls) -> CloudinaryStorage:
        if not settings.storage_configured:
            raise UploadUnavailableError()
        return cls(
            settings.cloudinary_cloud_name or "",
            settings.cloudinary_api_key or "",
            settings.cloudinary_api_secret or "",
            folder=settings.cloudinary_folder,
            timeout=settings.upload_timeout_seconds,
        )

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, action: str, data: dict[str, Any], files: Any = None) -> dict[str, Any]:
        url = f"{self.base_url}/{self.cloud_name}/image/{action}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, data=data, files=files)
        except httpx.HTTPError as exc:
            logger.error("Image storage request to %s failed", action, exc_info=True)
            raise UploadError() from exc

        try:
            body: dict[str, Any] = response.json()
        except ValueError:
            body = {}
        if response.status_code != httpx.codes.OK:
            message = (body.get("error") or {}).get("message") or "Image upload failed"
            logger.warning("Image storage %s returned %s: %s", action, response.status_code, message)
            raise UploadError(message)
        return body

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> UploadedImage:
        data = self._signed({"folder": self.folder})
        body = await self._post("upload", data, files={"file": (filename, content, content_type)})
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise UploadError("Image storage returned an incomplete response")
        return UploadedImage(
            url=url,
            public_id=public_id,
            width=body.get("width"),
            height=body.get("height"),
        )

    async def delete_image(self, public_id: str) -> None:
        data = self._signed({"public_id": public_id})
        body = await self._post("destroy", data)
        if body.get("result") not in ("ok", "not found"):
            raise UploadError("Failed to delete image")
