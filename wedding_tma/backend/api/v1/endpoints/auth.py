"""
Auth API Endpoints.

Telegram Mini App login and session introspection.
"""

from fastapi import APIRouter, Response

from wedding_tma.backend.core.config import get_app_config
from wedding_tma.backend.core.dependencies import AuthServiceDep, CurrentUser, RequestId
from wedding_tma.backend.schemas.auth import LoginResponse, TelegramLoginRequest, UserResponse
from wedding_tma.backend.schemas.base import ApiResponse, ResponseMetadata

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    security = get_app_config().security
    cookie = security.session.cookie
    response.set_cookie(
        key=cookie.name,
        value=token,
        max_age=security.jwt.access_token_expire_days * 24 * 60 * 60,
        httponly=cookie.http_only,
        secure=cookie.secure,
        samesite=cookie.same_site,
    )


@router.post(
    "/telegram",
    response_model=ApiResponse[LoginResponse],
    summary="Log in with Telegram initData",
    description="Verify the initData signature, upsert the user and issue a session token.",
)
async def login_telegram(
    data: TelegramLoginRequest,
    response: Response,
    auth: AuthServiceDep,
    request_id: RequestId,
) -> ApiResponse[LoginResponse]:
    """Exchange signed initData for a session token."""
    token, user = await auth.authenticate(data.init_data)

    if get_app_config().security.session.transport == "cookie":
        _set_session_cookie(response, token)

    return ApiResponse(
        data=LoginResponse(token=token, user=UserResponse.model_validate(user)),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Current user",
)
async def get_me(user: CurrentUser, request_id: RequestId) -> ApiResponse[UserResponse]:
    """Return the user bound to the session token."""
    return ApiResponse(
        data=UserResponse.model_validate(user),
        metadata=ResponseMetadata(request_id=request_id),
    )
