"""
S3-compatible object storage for space images.

Credentials come from the standard AWS environment variables
(AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY) picked up by boto3.
"""

from __future__ import annotations

from typing import Any, Optional

import boto3
import structlog
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from golocal_spaces.errors import StorageError
from golocal_spaces.metrics import uploads

logger = structlog.get_logger(__name__)


def build_s3_client(endpoint_url: Optional[str], region: Optional[str]) -> Any:
    """Get configured boto3 S3 client."""
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        region_name=region,
        config=Config(signature_version="s3v4"),
    )


class ObjectStorage:
    """
    Upload and delete objects, returning public URLs.

    Args:
        client: boto3 S3 client
        endpoint_url: S3-compatible endpoint, used to derive public URLs
        public_base_url: Public URL prefix; objects resolve to
            <public_base_url>/<bucket>/<key>
    """

    def __init__(
        self,
        client: Any,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ) -> None:
        self.client = client
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url

    def public_url(self, bucket: str, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{bucket}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{bucket}/{key}"
        return f"https://{bucket}.s3.amazonaws.com/{key}"

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        """
        Store bytes under bucket/key.

        Returns:
            str: Public URL of the object

        Raises:
            StorageError: If the store rejects the upload
        """
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            uploads.labels(bucket=bucket, outcome="failure").inc()
            logger.error("upload_failed", bucket=bucket, key=key, error=str(e))
            raise StorageError("Failed to upload file") from e

        uploads.labels(bucket=bucket, outcome="success").inc()
        logger.info("upload_stored", bucket=bucket, key=key, size=len(data))
        return self.public_url(bucket, key)

    def delete(self, bucket: str, key: str) -> None:
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error("delete_failed", bucket=bucket, key=key, error=str(e))
            raise StorageError("Failed to delete file") from e
        logger.info("upload_deleted", bucket=bucket, key=key)
