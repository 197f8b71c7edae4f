"""
Document Storage using S3

Uploads applicant documents to an S3-compatible bucket under a folder prefix
and returns a stable reference to the stored object.

Dependencies: boto3
"""

import asyncio
import logging
from dataclasses import dataclass
from urllib.parse import quote
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


def encode_metadata(metadata: dict[str, str] | None) -> dict[str, str]:
    """Percent-encode metadata values as UTF-8 so non-ASCII text is accepted."""
    return {key: quote(value, safe=" ") for key, value in (metadata or {}).items()}


class StorageError(Exception):
    """Raised when an object could not be stored."""


@dataclass(frozen=True)
class StoredFile:
    """Reference to an uploaded object."""

    file_id: str
    link: str


class DocumentStorageClient:
    """S3 client for applicant document uploads."""

    def __init__(
        self,
        bucket: str,
        region: str,
        folder: str = "",
        public_base_url: str | None = None,
        s3_client=None,
    ) -> None:
        """
        Initialize the storage client.

        Args:
            bucket: S3 bucket name
            region: AWS region of the bucket
            folder: Key prefix every upload is placed under
            public_base_url: Base URL for links; defaults to the bucket's
                virtual-hosted HTTPS endpoint
            s3_client: Pre-built boto3 client (tests)
        """
        self._bucket = bucket
        self._region = region
        self._folder = folder.strip("/")
        self._public_base_url = (
            public_base_url.rstrip("/")
            if public_base_url
            else f"https://{bucket}.s3.{region}.amazonaws.com"
        )
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    def build_key(self, file_name: str) -> str:
        """Build a unique object key for a file name."""
        safe_name = file_name.replace("/", "_").strip() or "document"
        key = f"{uuid4().hex}_{safe_name}"
        return f"{self._folder}/{key}" if self._folder else key

    def link_for(self, key: str) -> str:
        return f"{self._public_base_url}/{quote(key)}"

    async def upload(
        self,
        data: bytes,
        file_name: str,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> StoredFile:
        """
        Upload a payload and return its reference.

        Args:
            data: File contents
            file_name: Original (or display) file name
            content_type: MIME type stored with the object
            metadata: Extra string metadata stored with the object;
                values are percent-encoded since S3 metadata must be ASCII

        Returns:
            StoredFile with the object key and its HTTPS link

        Raises:
            StorageError: If the upload fails
        """
        key = self.build_key(file_name)
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=encode_metadata(metadata),
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {key} to bucket {self._bucket}: {e}")
            raise StorageError(f"Upload of {file_name} failed") from e

        logger.info(f"Uploaded {len(data)} bytes to s3://{self._bucket}/{key}")
        return StoredFile(file_id=key, link=self.link_for(key))
