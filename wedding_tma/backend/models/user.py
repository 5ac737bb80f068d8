"""
User Model.

One row per Telegram identity. The approval workflow lives on this row
(approval_status, requested_at, resolved_at); there is no separate
request table.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from wedding_tma.backend.models.base import Base, TimestampMixin, UUIDMixin


class UserRole(str, Enum):
    ADMIN = "admin"
    GUEST = "guest"


class ApprovalStatus(str, Enum):
    """Approval states. NULL in the database means the user never asked."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class User(UUIDMixin, TimestampMixin, Base):
    """Telegram user known to the Mini App."""

    __tablename__ = "users"

    telegram_id: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    username: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=UserRole.GUEST.value,
    )
    approval_status: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        index=True,
    )
    requested_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, telegram_id={self.telegram_id!r}, role={self.role!r})>"
