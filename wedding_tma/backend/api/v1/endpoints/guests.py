"""
Guest Request API Endpoints.

Join requests from guests and the admin decision on them.
"""

from fastapi import APIRouter, Response

from wedding_tma.backend.core.dependencies import AdminUser, CurrentUser, DbSession, RequestId
from wedding_tma.backend.schemas.base import ApiResponse, ResponseMetadata
from wedding_tma.backend.schemas.guest import (
    JoinRequestResponse,
    JoinRequestStatus,
    ResolveRequest,
)
from wedding_tma.backend.services.approval import ApprovalService

router = APIRouter()


@router.post(
    "/request",
    response_model=ApiResponse[JoinRequestStatus],
    status_code=201,
    summary="Request to join",
    description="Creates a pending request. Repeated calls return the current status with 200.",
)
async def request_to_join(
    user: CurrentUser,
    db: DbSession,
    response: Response,
    request_id: RequestId,
) -> ApiResponse[JoinRequestStatus]:
    service = ApprovalService(db)
    status, created = await service.request(user)
    if not created:
        response.status_code = 200
    return ApiResponse(
        data=JoinRequestStatus(
            status=status.value,
            requested_at=user.requested_at,
            resolved_at=user.resolved_at,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/request/me",
    response_model=ApiResponse[JoinRequestStatus],
    summary="My request status",
)
async def get_my_request(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[JoinRequestStatus]:
    status = await ApprovalService(db).get_status(user)
    return ApiResponse(
        data=JoinRequestStatus(
            status=status.value,
            requested_at=user.requested_at,
            resolved_at=user.resolved_at,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/requests",
    response_model=ApiResponse[list[JoinRequestResponse]],
    summary="List join requests",
    description="All requests, newest first. Admins only.",
)
async def list_requests(
    admin: AdminUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[JoinRequestResponse]]:
    users = await ApprovalService(db).list_requests()
    return ApiResponse(
        data=[JoinRequestResponse.model_validate(user) for user in users],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/requests/{user_id}",
    response_model=ApiResponse[JoinRequestResponse],
    summary="Approve or deny a request",
)
async def resolve_request(
    user_id: str,
    data: ResolveRequest,
    admin: AdminUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[JoinRequestResponse]:
    user = await ApprovalService(db).resolve(admin, user_id, data.action)
    return ApiResponse(
        data=JoinRequestResponse.model_validate(user),
        metadata=ResponseMetadata(request_id=request_id),
    )
