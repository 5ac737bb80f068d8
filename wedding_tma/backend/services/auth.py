"""
Auth Service.

Turns a verified Telegram identity into a local user and a session token.

The token carries who the user is (id, Telegram id, role) but never the
approval status: every request re-reads the user row, so an admin's
decision applies immediately without the guest logging in again.
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.exceptions import AuthenticationError
from wedding_tma.backend.core.security import (
    TelegramUser,
    authenticate_init_data,
    create_access_token,
    decode_token,
)
from wedding_tma.backend.core.utils import utc_now
from wedding_tma.backend.models.user import ApprovalStatus, User, UserRole
from wedding_tma.backend.repositories.user import UserRepository
from wedding_tma.backend.services.base import BaseService


class AuthService(BaseService):
    """Login via Telegram initData and session resolution."""

    def __init__(
        self,
        session: AsyncSession,
        bot_tokens: Sequence[str],
        admin_ids: Sequence[str],
    ) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)
        self._bot_tokens = list(bot_tokens)
        self._admin_ids = {str(admin_id).strip() for admin_id in admin_ids}

    def role_for(self, telegram_id: str) -> UserRole:
        return UserRole.ADMIN if telegram_id in self._admin_ids else UserRole.GUEST

    async def authenticate(self, init_data: str) -> tuple[str, User]:
        """
        Log a Telegram user in.

        Args:
            init_data: Raw initData string from the Mini App

        Returns:
            Tuple of (session token, user)

        Raises:
            SignatureInvalidError: If initData is not signed by a trusted bot
            MalformedIdentityError: If initData carries no usable user
        """
        telegram_user = authenticate_init_data(init_data, self._bot_tokens)
        user = await self._execute_db_operation(
            "upsert_user",
            self.upsert_user(telegram_user),
        )
        token = create_access_token(
            {"sub": user.id, "telegram_id": user.telegram_id, "role": user.role}
        )
        self._log_operation("User authenticated", user_id=user.id, role=user.role)
        return token, user

    async def upsert_user(self, telegram_user: TelegramUser) -> User:
        """
        Create or refresh the user for a Telegram identity.

        Profile fields and role are overwritten on every login. The approval
        status is only initialised on creation, except that admins are always
        brought to approved.
        """
        telegram_id = str(telegram_user.id)
        role = self.role_for(telegram_id)
        profile = {
            "first_name": telegram_user.first_name,
            "last_name": telegram_user.last_name or "",
            "username": telegram_user.username or "",
            "role": role.value,
        }

        user = await self.repo.get_by_telegram_id(telegram_id)
        if user is None:
            # The Mini App may log in twice at once; the loser updates the winner's row
            status = ApprovalStatus.APPROVED.value if role is UserRole.ADMIN else None
            created = await self.repo.create_if_absent(
                "telegram_id",
                telegram_id=telegram_id,
                approval_status=status,
                **profile,
            )
            user = await self.repo.get_by_telegram_id(telegram_id)
            if created:
                self._log_operation("User created", user_id=user.id, role=role.value)
                return user

        if role is UserRole.ADMIN and user.approval_status != ApprovalStatus.APPROVED.value:
            profile["approval_status"] = ApprovalStatus.APPROVED.value
            profile["resolved_at"] = utc_now()
        return await self.repo.update(user.id, **profile)

    async def resolve_token(self, token: str | None) -> User:
        """
        Load the user a session token belongs to.

        Raises:
            AuthenticationError: If the token is missing, invalid, expired,
                or names a user that no longer exists
        """
        if not token:
            raise AuthenticationError()
        payload = decode_token(token)
        user = await self.repo.get_by_id_or_none(payload["sub"])
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        return user
