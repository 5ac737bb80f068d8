"""
Storage Test Fixtures.
"""

import pytest

from wedding_tma.backend.core import concurrency


@pytest.fixture(autouse=True)
def _fresh_semaphores():
    """Semaphores are created per event loop; each test runs its own loop."""
    concurrency._semaphores.clear()
    yield
    concurrency._semaphores.clear()
