"""
Gallery and Media Models.

Each user owns at most one gallery, created on their first upload.
photo_count mirrors the number of photo rows in media and is only ever
changed with an SQL-side increment or decrement.

The table is named `media` rather than `photos` so that videos can be
stored alongside photos later with type='video'.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wedding_tma.backend.core.utils import utc_now
from wedding_tma.backend.models.base import Base, TimestampMixin, UUIDMixin


class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"  # reserved, uploads accept photos only


class Gallery(UUIDMixin, TimestampMixin, Base):
    """A guest's photo gallery."""

    __tablename__ = "galleries"
    __table_args__ = (
        CheckConstraint("photo_count >= 0", name="ck_galleries_photo_count_non_negative"),
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        unique=True,
        nullable=False,
    )
    guest_name: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    cover_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Gallery(id={self.id}, user_id={self.user_id}, photo_count={self.photo_count})>"


class Media(UUIDMixin, Base):
    """One uploaded asset held by the storage provider."""

    __tablename__ = "media"

    gallery_id: Mapped[str] = mapped_column(
        ForeignKey("galleries.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=MediaType.PHOTO.value,
    )
    cloud_id: Mapped[str] = mapped_column(String(1024), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(Text, nullable=False)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Media(id={self.id}, gallery_id={self.gallery_id}, type={self.type!r})>"
