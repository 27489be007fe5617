"""
S3 client for job photo bucket operations.

Uploads photo evidence and deletes it again when a photo is removed
from a job. Stored photos are referenced by their public URL.

Dependencies: boto3
System role: File storage collaborator behind photo uploads
"""

import asyncio
import logging

import boto3
from botocore.exceptions import ClientError

from motoshop.core.exceptions import RemoteFailure

logger = logging.getLogger(__name__)


class S3PhotoStorage:
    """S3 client for the job photo bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "ap-northeast-2",
        public_base_url: str | None = None,
        s3_client=None,
    ) -> None:
        """
        Initialize S3 client for photo bucket.

        Args:
            bucket: S3 bucket name for photo storage
            region: AWS region for S3 bucket
            public_base_url: URL prefix objects are served from (CDN)
            s3_client: Preconfigured boto3 client (created if None)
        """
        if not bucket:
            raise ValueError("bucket is required")

        self._bucket = bucket
        self._region = region
        self._public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    def public_url(self, path: str) -> str:
        """Public URL an object at path is served from."""
        return f"{self._public_base_url}/{path.lstrip('/')}"

    def key_for_url(self, url: str) -> str | None:
        """
        Map a public URL back to its object key.

        Returns:
            str | None: Object key, or None when url is not in this bucket
        """
        prefix = f"{self._public_base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):]

    async def upload(self, path: str, blob: bytes, content_type: str) -> str:
        """
        Store blob at path.

        Args:
            path: Object key
            blob: File content
            content_type: MIME type of the file

        Returns:
            str: Public URL of the stored object

        Raises:
            RemoteFailure: If the put is rejected by S3
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=path,
                Body=blob,
                ContentType=content_type,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            logger.error(
                "Photo upload failed",
                extra={"s3_key": path, "error_code": error_code},
            )
            raise RemoteFailure(
                "Could not upload photo",
                operation="upload",
                details={"s3_key": path, "error_code": error_code},
            ) from e

        logger.info("Photo uploaded", extra={"s3_key": path, "size": len(blob)})
        return self.public_url(path)

    async def remove(self, path: str) -> None:
        """
        Delete the object at path.

        Raises:
            RemoteFailure: If the delete is rejected by S3
        """
        try:
            await asyncio.to_thread(
                self._s3_client.delete_object,
                Bucket=self._bucket,
                Key=path,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            logger.error(
                "Photo removal failed",
                extra={"s3_key": path, "error_code": error_code},
            )
            raise RemoteFailure(
                "Could not remove photo",
                operation="remove",
                details={"s3_key": path, "error_code": error_code},
            ) from e

        logger.info("Photo removed", extra={"s3_key": path})
