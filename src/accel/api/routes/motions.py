from __future__ import annotations

from functools import lru_cache
from typing import Awaitable, Callable

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from accel.core.assembly import build_accelerator
from accel.core.config.settings import settings
from accel.core.engine.engine import Accelerator
from accel.core.errors import AccelError, CatalogError

router = APIRouter(prefix="/motions", tags=["motions"])

log = structlog.get_logger()


@lru_cache(maxsize=1)
def _default_accelerator() -> Accelerator:
    return build_accelerator(settings)


def get_accelerator() -> Accelerator:
    """
    Process-wide accelerator built from settings (overridable in tests).
    """
    try:
        return _default_accelerator()
    except CatalogError as e:
        raise HTTPException(status_code=500, detail=f"motion catalog unavailable: {e}")


# =========================
# Schemas
# =========================

class MotionInfo(BaseModel):
    index: int
    name: str
    applied: bool


class MotionsListResponse(BaseModel):
    status: int
    motions: list[MotionInfo]


class StatusResponse(BaseModel):
    status: int
    total: int


class MoveRequest(BaseModel):
    delta: int = Field(..., description="Signed number of motions to move")


class GotoRequest(BaseModel):
    position: int = Field(..., description="Catalog index that should be the last one applied")


# =========================
# Routes
# =========================

async def _status(accelerator: Accelerator) -> StatusResponse:
    try:
        current = await accelerator.status()
    except AccelError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return StatusResponse(status=current, total=len(accelerator.motions))


async def _run(accelerator: Accelerator, action: Callable[[], Awaitable[None]], *, name: str) -> StatusResponse:
    try:
        await action()
    except AccelError as e:
        log.warning("api.run_failed", action=name, error_type=type(e).__name__, error_message=str(e))
        raise HTTPException(status_code=409, detail=f"{type(e).__name__}: {e}")
    return await _status(accelerator)


@router.get("", response_model=MotionsListResponse)
async def list_motions(accelerator: Accelerator = Depends(get_accelerator)) -> MotionsListResponse:
    current = (await _status(accelerator)).status
    return MotionsListResponse(
        status=current,
        motions=[
            MotionInfo(index=i, name=m.name, applied=i < current)
            for i, m in enumerate(accelerator.motions)
        ],
    )


@router.get("/status", response_model=StatusResponse)
async def get_status(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _status(accelerator)


@router.post("/move", response_model=StatusResponse)
async def move(payload: MoveRequest, accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, lambda: accelerator.move(payload.delta), name="move")


@router.post("/goto", response_model=StatusResponse)
async def goto(payload: GotoRequest, accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, lambda: accelerator.goto(payload.position), name="goto")


@router.post("/up", response_model=StatusResponse)
async def up(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.up, name="up")


@router.post("/down", response_model=StatusResponse)
async def down(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.down, name="down")


@router.post("/add", response_model=StatusResponse)
async def add(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.add, name="add")


@router.post("/sub", response_model=StatusResponse)
async def sub(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.sub, name="sub")


@router.post("/redo", response_model=StatusResponse)
async def redo(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.redo, name="redo")


@router.post("/reset", response_model=StatusResponse)
async def reset(accelerator: Accelerator = Depends(get_accelerator)) -> StatusResponse:
    return await _run(accelerator, accelerator.reset, name="reset")


async def close_default_accelerator() -> None:
    if _default_accelerator.cache_info().currsize == 0:
        return
    try:
        await _default_accelerator().close()
    finally:
        _default_accelerator.cache_clear()
