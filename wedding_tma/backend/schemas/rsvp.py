"""
RSVP Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wedding_tma.backend.models.rsvp import RsvpStatus


class RsvpCreate(BaseModel):
    """Schema for submitting or replacing an RSVP."""

    status: RsvpStatus
    guest_count: int | None = Field(
        default=1,
        ge=1,
        le=10,
        description="Head count including the guest",
    )
    dietary_notes: str | None = Field(default="", max_length=1000)


class RsvpResponse(BaseModel):
    id: str
    user_id: str
    status: str
    guest_count: int
    dietary_notes: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RsvpWithGuest(RsvpResponse):
    """RSVP enriched with the guest's display name for admins."""

    guest_name: str


class RsvpStatsResponse(BaseModel):
    attending: int
    not_attending: int
    maybe: int
    total_guests: int = Field(description="Sum of guest_count over attending RSVPs")
