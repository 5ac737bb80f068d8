"""
Concurrency Infrastructure.

Thread pool and semaphore management for blocking SDK calls.
The storage backends ship synchronous clients (cloudinary, boto3); their
calls run on the shared I/O pool so request handlers keep suspending at
I/O boundaries instead of blocking the event loop.

Semaphores:
    Created per-dependency to limit concurrent access to external services.
    Sizing is configured in config/settings/concurrency.yaml.

Usage:
    from wedding_tma.backend.core.concurrency import get_semaphore, run_in_io_pool

    async with get_semaphore("external_api"):
        result = await run_in_io_pool(client.put_object, **params)
"""

import asyncio
import contextvars
import functools
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from wedding_tma.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_io_pool: ThreadPoolExecutor | None = None
_semaphores: dict[str, asyncio.Semaphore] = {}


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context or the
    request_id into worker threads. This subclass copies the current
    context before dispatching.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for blocking I/O operations.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        from wedding_tma.backend.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def run_in_io_pool(fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable on the shared I/O pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_io_pool(), functools.partial(fn, *args, **kwargs))


def get_semaphore(name: str) -> asyncio.Semaphore:
    """Get a named semaphore for concurrency-limiting external calls.

    Semaphores are created lazily. The capacity is read from concurrency.yaml
    under `semaphores.<name>`. If the name is not configured, defaults to 20.
    """
    if name not in _semaphores:
        from wedding_tma.backend.core.config import get_app_config
        semaphore_config = get_app_config().concurrency.semaphores
        capacity = getattr(semaphore_config, name, 20)
        _semaphores[name] = asyncio.Semaphore(capacity)
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return _semaphores[name]


async def shutdown_pools() -> None:
    """Shut down the I/O pool gracefully. Called during application shutdown.

    Waits up to shutdown.drain_seconds for in-flight calls, then abandons
    whatever is still queued.
    """
    global _io_pool

    if _io_pool is not None:
        from wedding_tma.backend.core.config import get_app_config
        drain_seconds = get_app_config().concurrency.shutdown.drain_seconds
        pool, _io_pool = _io_pool, None
        try:
            await asyncio.wait_for(asyncio.to_thread(pool.shutdown, wait=True), drain_seconds)
            logger.info("Thread pool shut down")
        except TimeoutError:
            pool.shutdown(wait=False, cancel_futures=True)
            logger.warning("Thread pool drain timed out", extra={"drain_seconds": drain_seconds})

    _semaphores.clear()
