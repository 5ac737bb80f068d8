"""
Storage Provider Interface.

Routes and services never talk to a cloud SDK directly; they depend on a
StorageProvider instance resolved once at startup. Adding a backend means
subclassing StorageProvider and registering it in StorageBackend.

Every remote call runs on the shared I/O pool, limited by the
`external_api` semaphore and bounded by the configured timeout. SDK errors
and timeouts surface as StorageProviderError. Calls are never retried.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from wedding_tma.backend.core.concurrency import get_semaphore, run_in_io_pool
from wedding_tma.backend.core.exceptions import StorageProviderError
from wedding_tma.backend.core.logging import get_logger
from wedding_tma.backend.models.gallery import MediaType

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class UploadOptions:
    folder: str
    mime_type: str


@dataclass(frozen=True)
class DeleteOptions:
    type: MediaType = MediaType.PHOTO


@dataclass(frozen=True)
class UploadResult:
    """What the provider hands back for a stored object."""

    cloud_id: str
    url: str
    thumbnail_url: str
    width: int | None = None
    height: int | None = None


class StorageProvider(ABC):
    """Capability interface for persisting and serving media bytes."""

    name: str = "abstract"
    sdk_errors: tuple[type[BaseException], ...] = ()

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    async def upload(self, data: bytes, options: UploadOptions) -> UploadResult:
        """Store bytes and return their canonical and thumbnail URLs."""

    @abstractmethod
    async def delete(self, cloud_id: str, options: DeleteOptions) -> None:
        """Remove a stored object."""

    @abstractmethod
    def get_thumbnail(self, cloud_id: str, width: int = 400, height: int = 400) -> str:
        """Build a thumbnail URL for an existing object."""

    async def _call(self, operation: str, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Run a blocking SDK call with the timeout and error policy."""
        try:
            async with get_semaphore("external_api"):
                async with asyncio.timeout(self.timeout_seconds):
                    return await run_in_io_pool(fn, *args, **kwargs)
        except TimeoutError:
            logger.error(
                "Storage call timed out",
                extra={
                    "provider": self.name,
                    "operation": operation,
                    "timeout_seconds": self.timeout_seconds,
                },
            )
            raise StorageProviderError(f"Storage {operation} timed out")
        except self.sdk_errors as e:
            logger.error(
                "Storage call failed",
                extra={"provider": self.name, "operation": operation, "error": str(e)},
            )
            raise StorageProviderError(f"Storage {operation} failed")
