"""
S3 Storage Provider.

Raw object storage. S3 has no transformation pipeline, so the thumbnail
URL is the original object URL and dimensions are unknown. Serving real
thumbnails needs an image proxy in front of the bucket.
"""

import uuid

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.storage.base import (
    DeleteOptions,
    StorageProvider,
    UploadOptions,
    UploadResult,
)

logger = get_logger(__name__)


class S3StorageProvider(StorageProvider):
    """Stores media verbatim in an S3 bucket."""

    name = "s3"
    sdk_errors = (BotoCoreError, ClientError)

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        timeout_seconds: float,
        public_base_url: str | None = None,
        client=None,
    ) -> None:
        super().__init__(timeout_seconds)
        self.bucket = bucket
        self.public_base_url = (
            public_base_url or f"https://{bucket}.s3.amazonaws.com"
        ).rstrip("/")
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    def _object_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    async def upload(self, data: bytes, options: UploadOptions) -> UploadResult:
        extension = options.mime_type.split("/")[-1] or "jpg"
        key = f"{options.folder}/{uuid.uuid4()}.{extension}"

        await self._call(
            "upload",
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=options.mime_type,
        )
        logger.debug("S3 object stored", extra={"bucket": self.bucket, "key": key})

        url = self._object_url(key)
        return UploadResult(cloud_id=key, url=url, thumbnail_url=url)

    async def delete(self, cloud_id: str, options: DeleteOptions) -> None:
        await self._call(
            "delete",
            self._client.delete_object,
            Bucket=self.bucket,
            Key=cloud_id,
        )

    def get_thumbnail(self, cloud_id: str, width: int = 400, height: int = 400) -> str:
        return self._object_url(cloud_id)
