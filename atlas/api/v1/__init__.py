"""API v1 routes."""

from fastapi import APIRouter

from atlas.api.v1 import auth, favorites, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
