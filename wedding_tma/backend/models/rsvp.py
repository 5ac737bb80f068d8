"""
RSVP Model.

One attendance answer per user. Read by the confirmed-guest gate.
"""

from enum import Enum

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wedding_tma.backend.models.base import Base, TimestampMixin, UUIDMixin


class RsvpStatus(str, Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "not_attending"
    MAYBE = "maybe"


class Rsvp(UUIDMixin, TimestampMixin, Base):
    """A guest's attendance answer."""

    __tablename__ = "rsvps"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        unique=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    guest_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    dietary_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Rsvp(user_id={self.user_id}, status={self.status!r})>"
