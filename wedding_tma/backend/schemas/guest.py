"""
Guest Request Schemas.

Join requests and the admin decision on them.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wedding_tma.backend.services.approval import ApprovalAction


class JoinRequestStatus(BaseModel):
    """Status of the caller's own join request."""

    status: str = Field(description="pending, approved or denied")
    requested_at: datetime | None = None
    resolved_at: datetime | None = None


class JoinRequestResponse(BaseModel):
    """A join request as seen by admins."""

    user_id: str = Field(validation_alias="id")
    telegram_id: str
    first_name: str
    last_name: str
    username: str
    status: str = Field(validation_alias="approval_status")
    requested_at: datetime | None
    resolved_at: datetime | None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ResolveRequest(BaseModel):
    """Admin decision on a pending request."""

    action: ApprovalAction
