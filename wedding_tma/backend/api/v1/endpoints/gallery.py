"""
Gallery API Endpoints.

Photo upload, browsing, and deletion for confirmed guests.
"""

from fastapi import APIRouter, File, UploadFile

from wedding_tma.backend.core.config import get_app_config
from wedding_tma.backend.core.dependencies import (
    ConfirmedGuest,
    CurrentUser,
    DbSession,
    RequestId,
    Storage,
)
from wedding_tma.backend.core.exceptions import ValidationError
from wedding_tma.backend.schemas.base import ApiResponse, ResponseMetadata
from wedding_tma.backend.schemas.gallery import (
    GalleryDetail,
    GalleryResponse,
    GallerySummary,
    MediaResponse,
)
from wedding_tma.backend.services.gallery import GalleryService

router = APIRouter()


def _service(db: DbSession, storage: Storage) -> GalleryService:
    return GalleryService(db, storage, get_app_config().application.gallery)


@router.post(
    "/upload",
    response_model=ApiResponse[MediaResponse],
    status_code=201,
    summary="Upload a photo",
    description="JPEG, PNG or WebP, up to the configured size. Confirmed guests only.",
)
async def upload_photo(
    user: ConfirmedGuest,
    db: DbSession,
    storage: Storage,
    request_id: RequestId,
    file: UploadFile | None = File(default=None),
) -> ApiResponse[MediaResponse]:
    """Store a photo in the caller's gallery."""
    if file is None:
        raise ValidationError("No file provided")

    max_bytes = get_app_config().application.gallery.max_upload_bytes
    # one byte past the limit is enough to reject
    data = await file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationError(
            "File too large",
            details={"max_bytes": max_bytes},
        )

    media = await _service(db, storage).upload_photo(user, data, file.content_type or "")
    return ApiResponse(
        data=MediaResponse.model_validate(media),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[GallerySummary]],
    summary="List galleries",
    description="All galleries, most recently updated first, with preview thumbnails.",
)
async def list_galleries(
    user: ConfirmedGuest,
    db: DbSession,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[list[GallerySummary]]:
    rows = await _service(db, storage).list_galleries()
    return ApiResponse(
        data=[
            GallerySummary(
                **GalleryResponse.model_validate(gallery).model_dump(),
                previews=previews,
            )
            for gallery, previews in rows
        ],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{gallery_id}",
    response_model=ApiResponse[GalleryDetail],
    summary="Get a gallery",
)
async def get_gallery(
    gallery_id: str,
    user: ConfirmedGuest,
    db: DbSession,
    storage: Storage,
    request_id: RequestId,
) -> ApiResponse[GalleryDetail]:
    gallery, photos = await _service(db, storage).get_gallery(gallery_id)
    return ApiResponse(
        data=GalleryDetail(
            **GalleryResponse.model_validate(gallery).model_dump(),
            photos=[MediaResponse.model_validate(photo) for photo in photos],
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/media/{media_id}",
    status_code=204,
    summary="Delete a photo",
    description="Owner or admin. Removes the stored object first, then the record.",
)
async def delete_media(
    media_id: str,
    user: CurrentUser,
    db: DbSession,
    storage: Storage,
    request_id: RequestId,
) -> None:
    await _service(db, storage).delete_media(media_id, user)
