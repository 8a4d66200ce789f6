"""Object storage for verification documents and scam evidence.

Uploads go to a Supabase Storage compatible API:
- POST {storage_url}/storage/v1/object/{bucket}/{path}
- Public URL: {storage_url}/storage/v1/object/public/{bucket}/{path}

Limits (checked before any network call):
- Max size: settings.upload_max_bytes (5 MiB)
- Allowed types: settings.upload_allowed_types (PDF, JPEG, PNG, GIF)
"""

from __future__ import annotations

import logging
import os
from typing import Protocol
from urllib.parse import quote
from uuid import uuid4

import httpx

from verifylink.services.errors import StorageError, ValidationError
from verifylink.settings import Settings, get_settings

logger = logging.getLogger("uvicorn.error")

# Content type -> extension used when the client filename has none
_EXTENSIONS = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


class ObjectStorage(Protocol):
    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str: ...


def validate_upload(content_type: str | None, size: int, *, settings: Settings | None = None) -> str:
    """Check type and size of an uploaded file.

    Returns:
        Normalized content type.

    Raises:
        ValidationError: Empty, too large or disallowed type.
    """
    settings = settings or get_settings()
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype not in settings.upload_allowed_types:
        raise ValidationError(
            "Please upload a PDF or image file (JPEG, PNG, GIF)",
            {"field": "file", "content_type": ctype, "allowed": settings.upload_allowed_types},
        )
    if size <= 0:
        raise ValidationError("Uploaded file is empty", {"field": "file"})
    if size > settings.upload_max_bytes:
        raise ValidationError(
            f"File size should be less than {settings.upload_max_bytes // (1024 * 1024)}MB",
            {"field": "file", "size": size, "max_bytes": settings.upload_max_bytes},
        )
    return ctype


def build_object_path(prefix: str, filename: str | None, content_type: str | None = None) -> str:
    """Generate a unique object path: {prefix}/{uuid}.{ext}"""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    if not ext or not ext.isalnum():
        ext = _EXTENSIONS.get((content_type or "").lower(), "bin")
    return f"{prefix.strip('/')}/{uuid4()}.{ext}"


class SupabaseStorageGateway:
    """Thin HTTP client for a Supabase Storage compatible object store."""

    def __init__(self, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._http_client = http_client

    def public_url(self, bucket: str, path: str) -> str:
        base = self.settings.storage_url.rstrip("/")
        return f"{base}/storage/v1/object/public/{bucket}/{quote(path)}"

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        if not self.settings.storage_service_key:
            logger.error("STORAGE_SERVICE_KEY is not set - cannot upload files")
            raise StorageError("File storage is not configured")

        url = f"{self.settings.storage_url.rstrip('/')}/storage/v1/object/{bucket}/{quote(path)}"
        headers = {
            "Authorization": f"Bearer {self.settings.storage_service_key}",
            "apikey": self.settings.storage_service_key,
            "Content-Type": content_type,
            "x-upsert": "false",
        }
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(url, content=data, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    resp = await client.post(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[storage] upload failed bucket={bucket} path={path}: {type(e).__name__}")
            raise StorageError("File upload failed, please try again") from e

        if resp.status_code >= 300:
            logger.error(f"[storage] upload error {resp.status_code} bucket={bucket}: {resp.text[:200]}")
            raise StorageError("File upload failed, please try again", {"status_code": resp.status_code})

        logger.info(f"[storage] uploaded bucket={bucket} path={path} bytes={len(data)}")
        return self.public_url(bucket, path)
