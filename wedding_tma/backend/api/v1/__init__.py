"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from wedding_tma.backend.api.v1.endpoints import auth, gallery, guests, rsvp

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(guests.router, prefix="/guests", tags=["guests"])
router.include_router(rsvp.router, prefix="/rsvp", tags=["rsvp"])
router.include_router(gallery.router, prefix="/gallery", tags=["gallery"])
