"""Image upload schemas."""

from pydantic import BaseModel


class UploadedImageResponse(BaseModel):
    url: str
    public_id: str
    width: int | None = None
    height: int | None = None
