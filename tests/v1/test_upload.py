# tests/v1/test_upload.py
"""Tests for image upload endpoints."""

from fastapi import status

from guildhall.core.settings import settings

UPLOAD = "/api/v1/upload/image"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_upload_unavailable_without_configuration(client, admin_token, monkeypatch):
    monkeypatch.setattr(settings, "cloudinary_cloud_name", None)
    response = client.post(
        UPLOAD, files={"file": ("avatar.png", PNG_BYTES, "image/png")}, headers=admin_token
    )
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["error"]["code"] == "UPLOAD_UNAVAILABLE"


def test_upload_image(client, fake_storage, admin_token):
    response = client.post(
        UPLOAD, files={"file": ("avatar.png", PNG_BYTES, "image/png")}, headers=admin_token
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["public_id"] == "guildhall/avatar"
    assert data["url"].endswith("guildhall/avatar.png")
    assert fake_storage.uploaded["guildhall/avatar"] == PNG_BYTES


def test_upload_rejects_non_images(client, fake_storage, admin_token):
    response = client.post(
        UPLOAD, files={"file": ("notes.txt", b"hello", "text/plain")}, headers=admin_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert fake_storage.uploaded == {}


def test_upload_rejects_empty_file(client, fake_storage, admin_token):
    response = client.post(
        UPLOAD, files={"file": ("empty.png", b"", "image/png")}, headers=admin_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_upload_rejects_large_file(client, fake_storage, admin_token, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 16)
    response = client.post(
        UPLOAD, files={"file": ("big.png", PNG_BYTES, "image/png")}, headers=admin_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert fake_storage.uploaded == {}


def test_upload_requires_auth(client, fake_storage):
    response = client.post(UPLOAD, files={"file": ("avatar.png", PNG_BYTES, "image/png")})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_image(client, fake_storage, admin_token):
    response = client.delete(f"{UPLOAD}/guildhall/avatar", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK
    assert fake_storage.deleted == ["guildhall/avatar"]


def test_upload_requires_admin(client, fake_storage, auth_token):
    response = client.post(
        UPLOAD, files={"file": ("avatar.png", PNG_BYTES, "image/png")}, headers=auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert fake_storage.uploaded == {}


def test_delete_image_requires_admin(client, fake_storage, other_auth_token):
    response = client.delete(f"{UPLOAD}/guildhall/someone_elses_avatar", headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["error"]["code"] == "FORBIDDEN"
    assert fake_storage.deleted == []
