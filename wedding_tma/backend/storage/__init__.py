"""
Media Storage Providers.

The active backend is named in config/settings/storage.yaml and resolved
once, at application startup, into a StorageProvider instance:

    from wedding_tma.backend.storage import create_storage_provider

    provider = create_storage_provider(app_config.storage, settings)
"""

from enum import Enum

from wedding_tma.backend.core.config import Settings
from wedding_tma.backend.core.config_schema import StorageSchema
from wedding_tma.backend.core.exceptions import ConfigurationError
from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.storage.base import (
    DeleteOptions,
    StorageProvider,
    UploadOptions,
    UploadResult,
)

logger = get_logger(__name__)


class StorageBackend(str, Enum):
    CLOUDINARY = "cloudinary"
    S3 = "s3"


def _require(values: dict[str, str], backend: StorageBackend) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Storage provider '{backend.value}' is missing: {', '.join(missing)}"
        )


def create_storage_provider(config: StorageSchema, settings: Settings) -> StorageProvider:
    """
    Build the configured storage backend.

    Raises:
        ConfigurationError: If the provider name is unknown or its
            credentials are not set
    """
    try:
        backend = StorageBackend(config.provider.lower())
    except ValueError:
        raise ConfigurationError(
            f'Storage provider "{config.provider}" not found. '
            f"Check provider in config/settings/storage.yaml"
        )

    if backend is StorageBackend.CLOUDINARY:
        from wedding_tma.backend.storage.cloudinary_provider import CloudinaryStorageProvider

        _require(
            {
                "cloudinary.cloud_name": config.cloudinary.cloud_name,
                "CLOUDINARY_API_KEY": settings.cloudinary_api_key,
                "CLOUDINARY_API_SECRET": settings.cloudinary_api_secret,
            },
            backend,
        )
        provider: StorageProvider = CloudinaryStorageProvider(
            cloud_name=config.cloudinary.cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            timeout_seconds=config.timeout_seconds,
            thumbnail_width=config.cloudinary.thumbnail_width,
            thumbnail_height=config.cloudinary.thumbnail_height,
        )
    else:
        from wedding_tma.backend.storage.s3_provider import S3StorageProvider

        _require(
            {
                "s3.bucket": config.s3.bucket,
                "AWS_ACCESS_KEY_ID": settings.aws_access_key_id,
                "AWS_SECRET_ACCESS_KEY": settings.aws_secret_access_key,
            },
            backend,
        )
        provider = S3StorageProvider(
            bucket=config.s3.bucket,
            region=config.s3.region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            timeout_seconds=config.timeout_seconds,
            public_base_url=config.s3.public_base_url,
        )

    logger.info("Storage provider resolved", extra={"provider": backend.value})
    return provider


__all__ = [
    "DeleteOptions",
    "StorageBackend",
    "StorageProvider",
    "UploadOptions",
    "UploadResult",
    "create_storage_provider",
]
