from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from accel.api.routes.motions import get_accelerator
from accel.core.config.settings import settings
from accel.core.engine.engine import Accelerator

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """
    Liveness plus what the accelerator was assembled with.
    The cursor is not read, so an unreachable backend still reports ok.
    """

    status: str
    environment: str
    driver: str
    motions: int
    single_flight: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Accelerator health check",
)
def health(accelerator: Accelerator = Depends(get_accelerator)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        environment=settings.env,
        driver=type(accelerator.driver).__name__,
        motions=len(accelerator.motions),
        single_flight=accelerator.single_flight,
    )
