"""
Gallery Service.

Upload, browse and delete guest photos.

A gallery is created on its owner's first upload. Remote storage is always
touched before the database. A failed upload writes nothing, and a failed
remote delete keeps the local record so the delete can be retried.
A stored object whose record cannot be written is deleted again.

The capacity check and the insert are separate statements. Concurrent
uploads by the same guest can overshoot the limit by the number of
requests in flight; photo_count itself stays exact because it is only
changed with SQL-side increments.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.config_schema import GallerySchema
from wedding_tma.backend.core.exceptions import (
    AuthorizationError,
    CapacityExceededError,
    StorageProviderError,
    ValidationError,
)
from wedding_tma.backend.core.utils import parse_identifier
from wedding_tma.backend.models.gallery import Gallery, Media, MediaType
from wedding_tma.backend.models.user import User
from wedding_tma.backend.repositories.gallery import GalleryRepository, MediaRepository
from wedding_tma.backend.services.base import BaseService
from wedding_tma.backend.storage.base import (
    DeleteOptions,
    StorageProvider,
    UploadOptions,
    UploadResult,
)


class GalleryService(BaseService):
    """Service for gallery and media lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        storage: StorageProvider,
        config: GallerySchema,
    ) -> None:
        super().__init__(session)
        self.galleries = GalleryRepository(session)
        self.media = MediaRepository(session)
        self.storage = storage
        self.config = config

    def _folder_for(self, user: User) -> str:
        return f"{self.config.folder_prefix}/{user.telegram_id}"

    async def upload_photo(self, user: User, file_bytes: bytes, mime_type: str) -> Media:
        """
        Store a photo remotely and record it in the user's gallery.

        Args:
            user: Uploading guest
            file_bytes: Raw image bytes
            mime_type: Declared content type of the upload

        Returns:
            The created media record

        Raises:
            ValidationError: If the type is not allowed or the file is empty
            CapacityExceededError: If the gallery is already full
            StorageProviderError: If the remote upload fails
        """
        if mime_type not in self.config.allowed_mime_types:
            raise ValidationError("Only JPEG, PNG and WebP are allowed")
        if not file_bytes:
            raise ValidationError("Empty file")

        gallery = await self.galleries.get_by_user_id(user.id)
        if gallery is not None:
            photo_count = await self.media.count_photos(gallery.id)
            if photo_count >= self.config.max_photos_per_gallery:
                self._log_operation(
                    "Gallery full, upload rejected",
                    gallery_id=gallery.id,
                    photo_count=photo_count,
                )
                raise CapacityExceededError(
                    f"Gallery limit reached ({self.config.max_photos_per_gallery} photos max)"
                )

        stored = await self.storage.upload(
            file_bytes,
            UploadOptions(folder=self._folder_for(user), mime_type=mime_type),
        )

        try:
            media = await self._record_upload(user, gallery, stored)
        except Exception:
            await self._discard_upload(stored)
            raise

        self._log_operation(
            "Photo uploaded",
            gallery_id=media.gallery_id,
            media_id=media.id,
            provider=self.storage.name,
        )
        return media

    async def _record_upload(
        self,
        user: User,
        gallery: Gallery | None,
        stored: UploadResult,
    ) -> Media:
        if gallery is None:
            # A concurrent first upload may have created it since the lookup
            created = await self._execute_db_operation(
                "create_gallery",
                self.galleries.create_if_absent(
                    "user_id",
                    user_id=user.id,
                    guest_name=user.display_name,
                    cover_photo_url=stored.thumbnail_url,
                    photo_count=0,
                ),
            )
            gallery = await self.galleries.get_by_user_id(user.id)
            if created:
                self._log_operation("Gallery created", gallery_id=gallery.id, user_id=user.id)

        media = await self._execute_db_operation(
            "create_media",
            self.media.create(
                gallery_id=gallery.id,
                user_id=user.id,
                type=MediaType.PHOTO.value,
                cloud_id=stored.cloud_id,
                url=stored.url,
                thumbnail_url=stored.thumbnail_url,
                width=stored.width,
                height=stored.height,
            ),
        )
        await self._execute_db_operation(
            "increment_photo_count",
            self.galleries.adjust_photo_count(gallery.id, 1),
        )
        return media

    async def _discard_upload(self, stored: UploadResult) -> None:
        """Remove a remote object whose database record could not be written."""
        try:
            await self.storage.delete(stored.cloud_id, DeleteOptions(type=MediaType.PHOTO))
        except StorageProviderError:
            self._logger.error(
                "Orphaned remote object",
                extra={"cloud_id": stored.cloud_id, "provider": self.storage.name},
            )

    async def list_galleries(self) -> list[tuple[Gallery, list[str]]]:
        """All galleries, most recently updated first, with preview thumbnails."""
        result = []
        for gallery in await self.galleries.list_recent():
            photos = await self.media.list_photos(gallery.id, limit=self.config.preview_count)
            result.append((gallery, [photo.thumbnail_url for photo in photos]))
        return result

    async def get_gallery(self, gallery_id: str) -> tuple[Gallery, list[Media]]:
        """
        Raises:
            InvalidIdentifierError: If gallery_id is malformed
            NotFoundError: If the gallery does not exist
        """
        gallery_id = parse_identifier(gallery_id, "gallery")
        gallery = await self.galleries.get_by_id(gallery_id)
        photos = await self.media.list_photos(gallery.id)
        return gallery, photos

    async def delete_media(self, media_id: str, requester: User) -> None:
        """
        Delete a photo remotely, then locally.

        Raises:
            InvalidIdentifierError: If media_id is malformed
            NotFoundError: If the media does not exist
            AuthorizationError: If requester is neither owner nor admin
            StorageProviderError: If the remote delete fails
        """
        media_id = parse_identifier(media_id, "photo")
        media = await self.media.get_by_id(media_id)

        if media.user_id != requester.id and not requester.is_admin:
            raise AuthorizationError("Not allowed")

        await self.storage.delete(media.cloud_id, DeleteOptions(type=MediaType(media.type)))

        gallery_id = media.gallery_id
        deleted_thumbnail = media.thumbnail_url
        await self._execute_db_operation("delete_media", self.media.delete(media.id))
        await self._execute_db_operation(
            "decrement_photo_count",
            self.galleries.adjust_photo_count(gallery_id, -1),
        )

        gallery = await self.galleries.get_by_id(gallery_id)
        if gallery.cover_photo_url == deleted_thumbnail:
            remaining = await self.media.list_photos(gallery_id, limit=1)
            new_cover = remaining[0].thumbnail_url if remaining else None
            await self._execute_db_operation(
                "set_cover",
                self.galleries.set_cover(gallery_id, new_cover),
            )

        self._log_operation(
            "Photo deleted",
            gallery_id=gallery_id,
            media_id=media_id,
            requester_id=requester.id,
        )
