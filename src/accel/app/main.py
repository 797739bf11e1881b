from __future__ import annotations

import structlog
from fastapi import FastAPI

from accel.api import router as api_router
from accel.api.routes.motions import close_default_accelerator
from accel.core.config.settings import settings
from accel.core.logging.setup import configure_logging

log = structlog.get_logger()


def create_app() -> FastAPI:
    """
    Application factory.

    Single place where the FastAPI app is created and configured.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title="accel",
        version="0.1.0",
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        log.info(
            "app.startup",
            environment=settings.env,
            motions_dir=str(settings.motions_dir),
        )

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await close_default_accelerator()
        log.info("app.shutdown")

    # Mount API
    app.include_router(api_router, prefix="/api")

    return app


# ASGI entrypoint
app = create_app()
