"""
RSVP Repository.

Data access for attendance answers and their summary counts.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.models.rsvp import Rsvp, RsvpStatus
from wedding_tma.backend.models.user import User
from wedding_tma.backend.repositories.base import BaseRepository


class RsvpRepository(BaseRepository[Rsvp]):
    """Repository for Rsvp model."""

    model = Rsvp
    not_found_message = "No RSVP found yet"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_user_id(self, user_id: str) -> Rsvp | None:
        result = await self.session.execute(
            select(Rsvp).where(Rsvp.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_with_users(self) -> list[tuple[Rsvp, User | None]]:
        """All RSVPs paired with their owner, newest answer first."""
        result = await self.session.execute(
            select(Rsvp, User)
            .outerjoin(User, User.id == Rsvp.user_id)
            .order_by(Rsvp.updated_at.desc())
        )
        return [(rsvp, user) for rsvp, user in result.all()]

    async def count_by_status(self) -> dict[str, int]:
        """Number of RSVPs per status; statuses with no rows map to 0."""
        result = await self.session.execute(
            select(Rsvp.status, func.count()).group_by(Rsvp.status)
        )
        counts = {status.value: 0 for status in RsvpStatus}
        counts.update({status: count for status, count in result.all()})
        return counts

    async def sum_attending_guests(self) -> int:
        """Total head count across attending RSVPs."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Rsvp.guest_count), 0))
            .where(Rsvp.status == RsvpStatus.ATTENDING.value)
        )
        return int(result.scalar_one())
