"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the real
application, with an in-memory storage provider in place of the cloud.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from wedding_tma.backend.core.database import get_db_session
from wedding_tma.backend.core.dependencies import get_auth_service
from wedding_tma.backend.core.exceptions import StorageProviderError
from wedding_tma.backend.core.security import create_access_token
from wedding_tma.backend.core.utils import utc_now
from wedding_tma.backend.models import Base
from wedding_tma.backend.models.rsvp import Rsvp, RsvpStatus
from wedding_tma.backend.models.user import ApprovalStatus, User, UserRole
from wedding_tma.backend.services.auth import AuthService
from wedding_tma.backend.storage.base import (
    DeleteOptions,
    StorageProvider,
    UploadOptions,
    UploadResult,
)


# =============================================================================
# Storage Fixtures
# =============================================================================


class FakeStorageProvider(StorageProvider):
    """
    In-memory storage backend.

    Records every call so tests can assert on what reached the provider.
    `on_upload` runs inside upload() before the result is returned, which
    lets a test interleave other work with an in-flight upload.
    """

    name = "fake"

    def __init__(self) -> None:
        super().__init__(timeout_seconds=5)
        self.objects: dict[str, bytes] = {}
        self.uploads: list[UploadOptions] = []
        self.deletes: list[str] = []
        self.fail_uploads = False
        self.fail_deletes = False
        self.on_upload: Callable[[], Awaitable[None]] | None = None
        self._counter = 0

    async def upload(self, data: bytes, options: UploadOptions) -> UploadResult:
        self.uploads.append(options)
        if self.fail_uploads:
            raise StorageProviderError("Storage upload failed")
        if self.on_upload is not None:
            hook, self.on_upload = self.on_upload, None
            await hook()

        self._counter += 1
        cloud_id = f"{options.folder}/object-{self._counter}"
        self.objects[cloud_id] = data
        return UploadResult(
            cloud_id=cloud_id,
            url=f"https://cdn.test/{cloud_id}",
            thumbnail_url=self.get_thumbnail(cloud_id),
            width=800,
            height=600,
        )

    async def delete(self, cloud_id: str, options: DeleteOptions) -> None:
        self.deletes.append(cloud_id)
        if self.fail_deletes:
            raise StorageProviderError("Storage delete failed")
        self.objects.pop(cloud_id, None)

    def get_thumbnail(self, cloud_id: str, width: int = 400, height: int = 400) -> str:
        return f"https://cdn.test/thumb/{width}x{height}/{cloud_id}"


@pytest.fixture
def storage() -> FakeStorageProvider:
    return FakeStorageProvider()


# =============================================================================
# Concurrent Request Fixtures
# =============================================================================


@pytest.fixture
async def concurrent_sessions(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory over a file-backed SQLite database.

    Each session gets its own connection and commits for real, so a test
    can interleave two requests the way two workers would.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(
    db_session: AsyncSession,
    storage: FakeStorageProvider,
    test_settings: dict[str, Any],
) -> FastAPI:
    """
    Application wired to the test session and the fake storage provider.

    All API operations use the same session that gets rolled back after
    the test. The admin_telegram_id from test_settings is an admin.
    """
    from wedding_tma.backend.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    def override_get_auth_service() -> AuthService:
        return AuthService(
            db_session,
            bot_tokens=test_settings["bot_tokens"],
            admin_ids=[test_settings["admin_telegram_id"]],
        )

    app = create_app(storage_provider=storage)
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_auth_service] = override_get_auth_service
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# User Fixtures
# =============================================================================


async def create_user(
    session: AsyncSession,
    telegram_id: str,
    first_name: str = "Guest",
    last_name: str = "",
    role: UserRole = UserRole.GUEST,
    status: ApprovalStatus | None = None,
    rsvp: RsvpStatus | None = None,
) -> User:
    """
    Insert a user directly, optionally with an approval status and RSVP.

    Users with a status get requested_at (and resolved_at once decided)
    so they look like they went through the join workflow.
    """
    now = utc_now()
    user = User(
        telegram_id=telegram_id,
        first_name=first_name,
        last_name=last_name,
        username="",
        role=role.value,
        approval_status=status.value if status else None,
        requested_at=now if status and role is UserRole.GUEST else None,
        resolved_at=now if status in (ApprovalStatus.APPROVED, ApprovalStatus.DENIED) else None,
    )
    session.add(user)
    await session.flush()

    if rsvp is not None:
        session.add(Rsvp(user_id=user.id, status=rsvp.value, guest_count=1, dietary_notes=""))
        await session.flush()

    await session.refresh(user)
    return user


@pytest.fixture
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """
    Usage:
        async def test_x(user_factory):
            user = await user_factory("1001", status=ApprovalStatus.PENDING)
    """
    async def factory(telegram_id: str, **kwargs: Any) -> User:
        return await create_user(db_session, telegram_id, **kwargs)

    return factory


@pytest.fixture
async def guest_user(user_factory) -> User:
    """Logged in, never asked to join."""
    return await user_factory("1001", first_name="Grace", last_name="Hopper")


@pytest.fixture
async def pending_user(user_factory) -> User:
    return await user_factory("1002", first_name="Alan", status=ApprovalStatus.PENDING)


@pytest.fixture
async def approved_user(user_factory) -> User:
    """Approved but has not RSVP'd."""
    return await user_factory("1003", first_name="Katherine", status=ApprovalStatus.APPROVED)


@pytest.fixture
async def confirmed_guest(user_factory) -> User:
    """Approved and attending."""
    return await user_factory(
        "1004",
        first_name="Ada",
        last_name="Lovelace",
        status=ApprovalStatus.APPROVED,
        rsvp=RsvpStatus.ATTENDING,
    )


@pytest.fixture
async def other_confirmed_guest(user_factory) -> User:
    return await user_factory(
        "1005",
        first_name="Charles",
        last_name="Babbage",
        status=ApprovalStatus.APPROVED,
        rsvp=RsvpStatus.ATTENDING,
    )


@pytest.fixture
async def admin_user(user_factory, test_settings: dict[str, Any]) -> User:
    return await user_factory(
        test_settings["admin_telegram_id"],
        first_name="Admin",
        role=UserRole.ADMIN,
        status=ApprovalStatus.APPROVED,
    )


# =============================================================================
# Authentication Fixtures
# =============================================================================


def auth_header(user: User) -> dict[str, str]:
    """Bearer header for a session token issued to user."""
    token = create_access_token(
        {"sub": user.id, "telegram_id": user.telegram_id, "role": user.role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """
    Usage:
        async def test_protected_endpoint(client, auth_headers, guest_user):
            response = await client.get("/api/v1/auth/me", headers=auth_headers(guest_user))
    """
    return auth_header
