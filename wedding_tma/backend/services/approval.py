"""
Approval Service.

Guest approval state machine and the authorization gates built on it.

    unset ──request()──> pending ──resolve(approve)──> approved
                                 └─resolve(deny)────> denied

approved and denied are terminal. A denied guest calling request() again
gets "denied" back; only a fresh pending request can be resolved.
Admins are created approved and never enter the workflow.
"""

from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from wedding_tma.backend.core.utils import parse_identifier, utc_now
from wedding_tma.backend.models.rsvp import RsvpStatus
from wedding_tma.backend.models.user import ApprovalStatus, User
from wedding_tma.backend.repositories.rsvp import RsvpRepository
from wedding_tma.backend.repositories.user import UserRepository
from wedding_tma.backend.services.base import BaseService


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    DENY = "deny"


_RESOLUTIONS = {
    ApprovalAction.APPROVE: ApprovalStatus.APPROVED,
    ApprovalAction.DENY: ApprovalStatus.DENIED,
}


def ensure_admin(user: User) -> None:
    """Admin gate."""
    if not user.is_admin:
        raise AuthorizationError("Admins only")


def ensure_approved(user: User) -> None:
    """Approved-guest gate."""
    if not user.is_approved:
        raise AuthorizationError("Your request to join is pending admin approval")


class ApprovalService(BaseService):
    """Join requests, admin decisions, and the confirmed-guest gate."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.rsvps = RsvpRepository(session)

    async def request(self, user: User) -> tuple[ApprovalStatus, bool]:
        """
        Ask to join the wedding.

        Only moves unset users to pending. Any later call reports the
        current status without changing it.

        Returns:
            Tuple of (current status, whether a new request was created)
        """
        if user.approval_status is not None:
            return ApprovalStatus(user.approval_status), False

        await self._execute_db_operation(
            "request_approval",
            self.users.update(
                user.id,
                approval_status=ApprovalStatus.PENDING.value,
                requested_at=utc_now(),
            ),
        )
        self._log_operation("Join request submitted", user_id=user.id)
        return ApprovalStatus.PENDING, True

    async def get_status(self, user: User) -> ApprovalStatus:
        """
        Raises:
            NotFoundError: If the user never requested to join
        """
        if user.approval_status is None:
            raise NotFoundError("No request found")
        return ApprovalStatus(user.approval_status)

    async def list_requests(self) -> list[User]:
        return await self.users.list_requests()

    async def resolve(self, admin: User, user_id: str, action: ApprovalAction) -> User:
        """
        Approve or deny a pending request.

        Args:
            admin: Acting user, must be an admin
            user_id: Id of the user whose request is resolved
            action: approve or deny

        Returns:
            The updated user

        Raises:
            AuthorizationError: If the acting user is not an admin
            InvalidIdentifierError: If user_id is malformed
            NotFoundError: If no such request exists
            ConflictError: If the request is not pending
        """
        ensure_admin(admin)
        user_id = parse_identifier(user_id, "request")

        user = await self.users.get_by_id_or_none(user_id)
        if user is None or user.requested_at is None:
            raise NotFoundError("Request not found")

        if user.approval_status != ApprovalStatus.PENDING.value:
            raise ConflictError(f"Request already {user.approval_status}")

        new_status = _RESOLUTIONS[ApprovalAction(action)]
        user = await self._execute_db_operation(
            "resolve_approval",
            self.users.update(
                user.id,
                approval_status=new_status.value,
                resolved_at=utc_now(),
            ),
        )
        self._log_operation(
            "Join request resolved",
            user_id=user.id,
            status=new_status.value,
            admin_id=admin.id,
        )
        return user

    async def ensure_confirmed_guest(self, user: User) -> None:
        """
        Confirmed-guest gate: approved and RSVP'd as attending.

        Reads the RSVP only; never changes it.
        """
        ensure_approved(user)
        rsvp = await self.rsvps.get_by_user_id(user.id)
        if rsvp is None or rsvp.status != RsvpStatus.ATTENDING.value:
            raise AuthorizationError("Only confirmed guests can see gallery")
