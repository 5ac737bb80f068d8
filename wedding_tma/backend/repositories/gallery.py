"""
Gallery and Media Repositories.

Data access for guest galleries and the media rows they own.
Counter changes are issued as single UPDATE statements so that concurrent
requests never overwrite each other's increments.
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.utils import utc_now
from wedding_tma.backend.models.gallery import Gallery, Media, MediaType
from wedding_tma.backend.repositories.base import BaseRepository


class GalleryRepository(BaseRepository[Gallery]):
    """Repository for Gallery model."""

    model = Gallery
    not_found_message = "Gallery not found"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_user_id(self, user_id: str) -> Gallery | None:
        result = await self.session.execute(
            select(Gallery)
            .where(Gallery.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_recent(self) -> list[Gallery]:
        """All galleries, most recently updated first."""
        result = await self.session.execute(
            select(Gallery)
            .order_by(Gallery.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def adjust_photo_count(self, gallery_id: str, delta: int) -> None:
        """Atomically add delta to photo_count and bump updated_at."""
        await self.session.execute(
            update(Gallery)
            .where(Gallery.id == gallery_id)
            .values(
                photo_count=Gallery.photo_count + delta,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()

    async def set_cover(self, gallery_id: str, cover_photo_url: str | None) -> None:
        await self.session.execute(
            update(Gallery)
            .where(Gallery.id == gallery_id)
            .values(cover_photo_url=cover_photo_url)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()


class MediaRepository(BaseRepository[Media]):
    """Repository for Media model."""

    model = Media
    not_found_message = "Photo not found"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def count_photos(self, gallery_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Media)
            .where(Media.gallery_id == gallery_id)
            .where(Media.type == MediaType.PHOTO.value)
        )
        return result.scalar_one()

    async def list_photos(self, gallery_id: str, limit: int | None = None) -> list[Media]:
        """Photos of a gallery, newest upload first."""
        query = (
            select(Media)
            .where(Media.gallery_id == gallery_id)
            .where(Media.type == MediaType.PHOTO.value)
            .order_by(Media.uploaded_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
