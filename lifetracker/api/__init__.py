"""API routes."""

from fastapi import APIRouter

from lifetracker.api import auth, categories, entries, health, scales

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/login", tags=["auth"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(entries.router, prefix="/entries", tags=["entries"])
router.include_router(scales.router, prefix="/scales", tags=["scales"])
