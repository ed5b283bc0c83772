"""HTTP routes."""

from fastapi import APIRouter

from starauth.api import auth, health
from starauth.core.config import settings

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix=settings.AUTH_PREFIX, tags=["auth"])
