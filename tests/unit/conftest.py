"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases
or storage providers.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from wedding_tma.backend.core.config_schema import (
    GallerySchema,
    JwtSchema,
    SessionCookieSchema,
    SessionSchema,
)


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Provides a fully mocked AsyncSession with common methods.
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


# =============================================================================
# Settings Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_settings() -> SimpleNamespace:
    """
    Secrets with test values.

    Usage:
        def test_with_settings(mock_settings):
            with patch("module.get_settings", return_value=mock_settings):
                ...
    """
    return SimpleNamespace(
        db_password="test_pass",
        jwt_secret="test-secret-key-that-is-long-enough-for-testing",
        telegram_bot_tokens="111111:primary-test-token",
        telegram_bot_token_list=["111111:primary-test-token"],
        cloudinary_api_key="cloud-key",
        cloudinary_api_secret="cloud-secret",
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="aws-secret",
    )


@pytest.fixture
def jwt_config() -> JwtSchema:
    """Real Pydantic JwtSchema with test values."""
    return JwtSchema(algorithm="HS256", access_token_expire_days=30, audience="wedding-tma")


@pytest.fixture
def gallery_config() -> GallerySchema:
    return GallerySchema(
        max_photos_per_gallery=50,
        max_upload_bytes=10 * 1024 * 1024,
        allowed_mime_types=["image/jpeg", "image/png", "image/webp"],
        preview_count=3,
        folder_prefix="wedding",
    )


@pytest.fixture
def mock_app_config(jwt_config: JwtSchema, gallery_config: GallerySchema) -> SimpleNamespace:
    """
    Application configuration built from real schema objects where it matters.

    Usage:
        def test_with_config(mock_app_config):
            with patch("module.get_app_config", return_value=mock_app_config):
                ...
    """
    session = SessionSchema(
        transport="bearer",
        cookie=SessionCookieSchema(name="jwt", http_only=True, secure=True, same_site="none"),
    )
    return SimpleNamespace(
        application=SimpleNamespace(
            environment="test",
            gallery=gallery_config,
            telegram=SimpleNamespace(admin_ids=[]),
        ),
        features=SimpleNamespace(api_detailed_errors=False),
        security=SimpleNamespace(jwt=jwt_config, session=session),
    )


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
