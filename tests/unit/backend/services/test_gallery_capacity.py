"""
Unit Tests for Gallery Upload Rules.

Validation and capacity checks must reject an upload before any call to
the storage provider.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from wedding_tma.backend.core.exceptions import (
    AuthorizationError,
    CapacityExceededError,
    StorageProviderError,
    ValidationError,
)
from wedding_tma.backend.models.user import User, UserRole
from wedding_tma.backend.services.gallery import GalleryService
from wedding_tma.backend.storage.base import UploadResult

MEDIA_ID = "7d9e1c4b-2a3f-4e5d-8c6b-1a2b3c4d5e6f"


def _guest(id="u-1") -> User:
    return User(id=id, telegram_id="4242", first_name="Ada", last_name="L", role=UserRole.GUEST.value)


@pytest.fixture
def storage() -> MagicMock:
    storage = MagicMock()
    storage.name = "fake"
    storage.upload = AsyncMock(
        return_value=UploadResult(cloud_id="c-1", url="https://cdn/c-1", thumbnail_url="https://cdn/t/c-1")
    )
    storage.delete = AsyncMock()
    return storage


@pytest.fixture
def service(mock_db_session, storage, gallery_config) -> GalleryService:
    return GalleryService(mock_db_session, storage, gallery_config)


class TestUploadValidation:
    async def test_rejects_disallowed_mime_type(self, service, storage):
        with pytest.raises(ValidationError, match="Only JPEG, PNG and WebP"):
            await service.upload_photo(_guest(), b"GIF89a", "image/gif")
        storage.upload.assert_not_called()

    async def test_rejects_empty_file(self, service, storage):
        with pytest.raises(ValidationError, match="Empty file"):
            await service.upload_photo(_guest(), b"", "image/jpeg")
        storage.upload.assert_not_called()


class TestCapacity:
    async def test_full_gallery_rejects_without_touching_storage(self, service, storage):
        gallery = MagicMock(id="g-1")
        with patch.object(service.galleries, "get_by_user_id", return_value=gallery), \
             patch.object(service.media, "count_photos", return_value=50):
            with pytest.raises(CapacityExceededError, match=r"Gallery limit reached \(50 photos max\)"):
                await service.upload_photo(_guest(), b"jpeg", "image/jpeg")

        storage.upload.assert_not_called()

    async def test_one_below_limit_is_accepted(self, service, storage):
        gallery = MagicMock(id="g-1")
        with patch.object(service.galleries, "get_by_user_id", return_value=gallery), \
             patch.object(service.media, "count_photos", return_value=49), \
             patch.object(service.media, "create", return_value=MagicMock(id="m-50")), \
             patch.object(service.galleries, "adjust_photo_count", new_callable=AsyncMock) as mock_adjust:
            media = await service.upload_photo(_guest(), b"jpeg", "image/jpeg")

        assert media.id == "m-50"
        storage.upload.assert_awaited_once()
        assert storage.upload.call_args.args[1].folder == "wedding/4242"
        mock_adjust.assert_awaited_once_with("g-1", 1)

    async def test_storage_failure_writes_nothing(self, service, storage):
        storage.upload.side_effect = StorageProviderError("Storage upload failed")
        with patch.object(service.galleries, "get_by_user_id", return_value=None), \
             patch.object(service.galleries, "create", new_callable=AsyncMock) as mock_create, \
             patch.object(service.media, "create", new_callable=AsyncMock) as mock_media:
            with pytest.raises(StorageProviderError):
                await service.upload_photo(_guest(), b"jpeg", "image/png")

        mock_create.assert_not_called()
        mock_media.assert_not_called()


class TestDeletePermissions:
    async def test_other_guest_cannot_delete(self, service, storage):
        media = MagicMock(id=MEDIA_ID, user_id="owner", type="photo")
        with patch.object(service.media, "get_by_id", return_value=media):
            with pytest.raises(AuthorizationError, match="Not allowed"):
                await service.delete_media(MEDIA_ID, _guest(id="someone-else"))

        storage.delete.assert_not_called()

    async def test_storage_failure_keeps_record(self, service, storage):
        storage.delete.side_effect = StorageProviderError("Storage delete failed")
        media = MagicMock(id=MEDIA_ID, user_id="u-1", type="photo", cloud_id="c-1")
        with patch.object(service.media, "get_by_id", return_value=media), \
             patch.object(service.media, "delete", new_callable=AsyncMock) as mock_delete:
            with pytest.raises(StorageProviderError):
                await service.delete_media(MEDIA_ID, _guest())

        mock_delete.assert_not_called()
