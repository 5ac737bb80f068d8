"""
RSVP Service.

Attendance answers and the admin summary over them.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.exceptions import NotFoundError
from wedding_tma.backend.models.rsvp import Rsvp, RsvpStatus
from wedding_tma.backend.models.user import User
from wedding_tma.backend.repositories.rsvp import RsvpRepository
from wedding_tma.backend.services.base import BaseService


@dataclass(frozen=True)
class RsvpStats:
    attending: int
    not_attending: int
    maybe: int
    total_guests: int


class RsvpService(BaseService):
    """Service for RSVP business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = RsvpRepository(session)

    async def submit(
        self,
        user: User,
        status: RsvpStatus,
        guest_count: int | None = None,
        dietary_notes: str | None = None,
    ) -> Rsvp:
        """Create or replace the user's RSVP."""
        values = {
            "status": RsvpStatus(status).value,
            "guest_count": guest_count or 1,
            "dietary_notes": dietary_notes or "",
        }
        existing = await self.repo.get_by_user_id(user.id)
        if existing is None:
            rsvp = await self._execute_db_operation(
                "create_rsvp",
                self.repo.create(user_id=user.id, **values),
            )
        else:
            rsvp = await self._execute_db_operation(
                "update_rsvp",
                self.repo.update(existing.id, **values),
            )
        self._log_operation("RSVP saved", user_id=user.id, status=values["status"])
        return rsvp

    async def get_mine(self, user: User) -> Rsvp:
        """
        Raises:
            NotFoundError: If the user has not answered yet
        """
        rsvp = await self.repo.get_by_user_id(user.id)
        if rsvp is None:
            raise NotFoundError(self.repo.not_found_message)
        return rsvp

    async def list_all(self) -> list[tuple[Rsvp, str]]:
        """Every RSVP with the guest's display name."""
        rows = await self.repo.list_with_users()
        return [
            (rsvp, user.display_name if user is not None else "Unknown")
            for rsvp, user in rows
        ]

    async def stats(self) -> RsvpStats:
        counts = await self.repo.count_by_status()
        return RsvpStats(
            attending=counts[RsvpStatus.ATTENDING.value],
            not_attending=counts[RsvpStatus.NOT_ATTENDING.value],
            maybe=counts[RsvpStatus.MAYBE.value],
            total_guests=await self.repo.sum_attending_guests(),
        )
