from __future__ import annotations

from fastapi import APIRouter

from accel.api.routes.health import router as health_router
from accel.api.routes.motions import router as motions_router

# Top-level API router
router = APIRouter()

# Route composition
router.include_router(health_router)
router.include_router(motions_router)
