"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from inkline.backend.api.v1.endpoints import categories, notes, profiles, stats

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(stats.router, prefix="/stats", tags=["stats"])
router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
