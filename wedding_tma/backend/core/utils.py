"""
Core Utilities.

Shared utility functions used across the backend.
All modules should import utilities from this module.
"""

from datetime import datetime, timezone
from uuid import UUID

from wedding_tma.backend.core.exceptions import InvalidIdentifierError


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC. This ensures consistent behavior across
    the codebase and simplifies database storage.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_identifier(value: str, resource: str) -> str:
    """
    Validate a client-supplied record identifier.

    Args:
        value: Raw identifier from the request path
        resource: Human-readable resource name for the error message

    Returns:
        Canonical (lower-case, hyphenated) UUID string

    Raises:
        InvalidIdentifierError: If the value is not a UUID
    """
    try:
        return str(UUID(value))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdentifierError(f"Invalid {resource} ID")
