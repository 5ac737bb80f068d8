"""
Gallery Schemas.

Pydantic schemas for gallery and media responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MediaResponse(BaseModel):
    """Schema for a stored photo."""

    id: str
    gallery_id: str
    user_id: str
    type: str
    url: str = Field(description="Canonical delivery URL")
    thumbnail_url: str
    width: int | None
    height: int | None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GalleryResponse(BaseModel):
    id: str
    user_id: str
    guest_name: str
    cover_photo_url: str | None
    photo_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GallerySummary(GalleryResponse):
    """Gallery in the listing, with a few newest thumbnails."""

    previews: list[str] = Field(default_factory=list)


class GalleryDetail(GalleryResponse):
    photos: list[MediaResponse] = Field(default_factory=list)
