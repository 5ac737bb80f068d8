"""
RSVP API Endpoints.
"""

from fastapi import APIRouter

from wedding_tma.backend.core.dependencies import AdminUser, ApprovedUser, DbSession, RequestId
from wedding_tma.backend.schemas.base import ApiResponse, ResponseMetadata
from wedding_tma.backend.schemas.rsvp import (
    RsvpCreate,
    RsvpResponse,
    RsvpStatsResponse,
    RsvpWithGuest,
)
from wedding_tma.backend.services.rsvp import RsvpService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[RsvpResponse],
    summary="Submit RSVP",
    description="Create or replace the caller's RSVP. Approved guests only.",
)
async def submit_rsvp(
    data: RsvpCreate,
    user: ApprovedUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[RsvpResponse]:
    rsvp = await RsvpService(db).submit(
        user,
        data.status,
        guest_count=data.guest_count,
        dietary_notes=data.dietary_notes,
    )
    return ApiResponse(
        data=RsvpResponse.model_validate(rsvp),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/me",
    response_model=ApiResponse[RsvpResponse],
    summary="My RSVP",
)
async def get_my_rsvp(
    user: ApprovedUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[RsvpResponse]:
    rsvp = await RsvpService(db).get_mine(user)
    return ApiResponse(
        data=RsvpResponse.model_validate(rsvp),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/all",
    response_model=ApiResponse[list[RsvpWithGuest]],
    summary="All RSVPs",
    description="Every RSVP with the guest's name. Admins only.",
)
async def list_rsvps(
    admin: AdminUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[RsvpWithGuest]]:
    rows = await RsvpService(db).list_all()
    return ApiResponse(
        data=[
            RsvpWithGuest(
                **RsvpResponse.model_validate(rsvp).model_dump(),
                guest_name=guest_name,
            )
            for rsvp, guest_name in rows
        ],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/stats",
    response_model=ApiResponse[RsvpStatsResponse],
    summary="RSVP summary",
)
async def rsvp_stats(
    admin: AdminUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[RsvpStatsResponse]:
    stats = await RsvpService(db).stats()
    return ApiResponse(
        data=RsvpStatsResponse.model_validate(stats, from_attributes=True),
        metadata=ResponseMetadata(request_id=request_id),
    )
