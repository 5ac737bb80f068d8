"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, the
authenticated user and the access gates layered on top of it, and the
storage provider chosen at startup.

Gates re-read the user row on every request, so approval changes take
effect without a new login.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_tma.backend.core.config import get_app_config, get_settings
from wedding_tma.backend.core.database import get_db_session
from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.models.user import User
from wedding_tma.backend.services.approval import (
    ApprovalService,
    ensure_admin,
    ensure_approved,
)
from wedding_tma.backend.services.auth import AuthService
from wedding_tma.backend.storage.base import StorageProvider

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def get_auth_service(db: DbSession) -> AuthService:
    """AuthService wired with the configured bot tokens and admin ids."""
    return AuthService(
        db,
        bot_tokens=get_settings().telegram_bot_token_list,
        admin_ids=get_app_config().application.telegram.admin_ids,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def extract_token(request: Request) -> str | None:
    """
    Find the session token on a request.

    The Authorization bearer header is always honoured; the session
    cookie is read when the cookie transport is configured.
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()

    session_config = get_app_config().security.session
    if session_config.transport == "cookie":
        return request.cookies.get(session_config.cookie.name)
    return None


async def get_current_user(request: Request, auth: AuthServiceDep) -> User:
    """
    Resolve the authenticated user.

    Raises:
        AuthenticationError: If no valid token is presented
    """
    return await auth.resolve_token(extract_token(request))


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    ensure_admin(user)
    return user


async def require_approved(user: CurrentUser) -> User:
    ensure_approved(user)
    return user


async def require_confirmed_guest(user: CurrentUser, db: DbSession) -> User:
    """Approved and RSVP'd as attending."""
    await ApprovalService(db).ensure_confirmed_guest(user)
    return user


AdminUser = Annotated[User, Depends(require_admin)]
ApprovedUser = Annotated[User, Depends(require_approved)]
ConfirmedGuest = Annotated[User, Depends(require_confirmed_guest)]


def get_storage_provider(request: Request) -> StorageProvider:
    """The provider instance resolved once in create_app()."""
    return request.app.state.storage_provider


Storage = Annotated[StorageProvider, Depends(get_storage_provider)]
