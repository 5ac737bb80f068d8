"""
Cloudinary Storage Provider.

Managed media CDN. Cloudinary resizes and converts on the fly, so the
thumbnail is a transformation URL (fill crop, auto quality, WebP) over
the same stored original.
"""

import io

import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils

from wedding_tma.backend.core.exceptions import StorageProviderError
from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.storage.base import (
    DeleteOptions,
    StorageProvider,
    UploadOptions,
    UploadResult,
)

logger = get_logger(__name__)

# Only images are accepted today; videos would use resource_type="video"
RESOURCE_TYPE = "image"


class CloudinaryStorageProvider(StorageProvider):
    """Stores media on Cloudinary and serves WebP thumbnails from its CDN."""

    name = "cloudinary"
    sdk_errors = (cloudinary.exceptions.Error,)

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout_seconds: float,
        thumbnail_width: int = 400,
        thumbnail_height: int = 400,
    ) -> None:
        super().__init__(timeout_seconds)
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }
        self.thumbnail_width = thumbnail_width
        self.thumbnail_height = thumbnail_height

    async def upload(self, data: bytes, options: UploadOptions) -> UploadResult:
        result = await self._call(
            "upload",
            cloudinary.uploader.upload,
            io.BytesIO(data),
            folder=options.folder,
            resource_type=RESOURCE_TYPE,
            **self._credentials,
        )
        public_id = result["public_id"]
        logger.debug("Cloudinary upload stored", extra={"public_id": public_id})
        return UploadResult(
            cloud_id=public_id,
            url=result["secure_url"],
            thumbnail_url=self.get_thumbnail(
                public_id, self.thumbnail_width, self.thumbnail_height
            ),
            width=result.get("width"),
            height=result.get("height"),
        )

    async def delete(self, cloud_id: str, options: DeleteOptions) -> None:
        result = await self._call(
            "delete",
            cloudinary.uploader.destroy,
            cloud_id,
            resource_type=RESOURCE_TYPE,
            invalidate=True,
            **self._credentials,
        )
        outcome = result.get("result")
        if outcome == "not found":
            logger.warning("Cloudinary object already gone", extra={"public_id": cloud_id})
        elif outcome != "ok":
            logger.error(
                "Cloudinary refused delete",
                extra={"public_id": cloud_id, "result": outcome},
            )
            raise StorageProviderError("Storage delete failed")

    def get_thumbnail(self, cloud_id: str, width: int = 400, height: int = 400) -> str:
        url, _ = cloudinary.utils.cloudinary_url(
            cloud_id,
            cloud_name=self._credentials["cloud_name"],
            width=width,
            height=height,
            crop="fill",
            quality="auto",
            format="webp",
            secure=True,
        )
        return url
