"""
User Repository.

Data access for users and their approval state.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.models.user import User
from wedding_tma.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_telegram_id(self, telegram_id: str) -> User | None:
        """Find the user bound to a Telegram identity."""
        result = await self.session.execute(
            select(User).where(User.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()

    async def list_requests(self) -> list[User]:
        """Users that asked to join, newest request first."""
        result = await self.session.execute(
            select(User)
            .where(User.approval_status.is_not(None))
            .where(User.requested_at.is_not(None))
            .order_by(User.requested_at.desc())
        )
        return list(result.scalars().all())
