"""Image uploads to object storage."""

from __future__ import annotations

import secrets
import time
from typing import Optional

import structlog

from golocal_spaces.errors import ValidationError
from golocal_spaces.storage.object_storage import ObjectStorage

logger = structlog.get_logger(__name__)


def generate_object_key(filename: Optional[str]) -> str:
    """
    Generate a unique key for an uploaded file.

    Format: <epoch-ms>-<random>.<ext>
    """
    ext = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else "bin"
    ext = "".join(c for c in ext if c.isalnum())[:10] or "bin"
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


class UploadService:
    def __init__(self, storage: ObjectStorage, default_bucket: str, max_bytes: int) -> None:
        self.storage = storage
        self.default_bucket = default_bucket
        self.max_bytes = max_bytes

    def upload_image(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
        bucket: Optional[str] = None,
    ) -> dict[str, str]:
        """
        Validate and store an image.

        Returns:
            dict: {"url", "path", "file_name"}

        Raises:
            ValidationError: Not an image, empty, or larger than max_bytes
            StorageError: The store rejected the upload
        """
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        if not data:
            raise ValidationError("No file provided")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"File size must be less than {self.max_bytes // (1024 * 1024)}MB"
            )

        bucket = bucket or self.default_bucket
        key = generate_object_key(filename)
        url = self.storage.upload(bucket, key, data, content_type)
        return {"url": url, "path": key, "file_name": key}

    def delete(self, path: Optional[str], bucket: Optional[str] = None) -> None:
        if not path:
            raise ValidationError("File path required")
        self.storage.delete(bucket or self.default_bucket, path)
