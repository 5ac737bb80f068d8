# Importing the models registers them on Base.metadata
from wedding_tma.backend.models.base import Base
from wedding_tma.backend.models.gallery import Gallery, Media, MediaType
from wedding_tma.backend.models.rsvp import Rsvp, RsvpStatus
from wedding_tma.backend.models.user import ApprovalStatus, User, UserRole

__all__ = [
    "ApprovalStatus",
    "Base",
    "Gallery",
    "Media",
    "MediaType",
    "Rsvp",
    "RsvpStatus",
    "User",
    "UserRole",
]
