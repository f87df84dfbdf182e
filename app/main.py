# app/main.py

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI

from app.config import get_settings
from app.lifecycle_status import StatusRegistry
from app.logging_config import configure_logging
from app.routers.expiration import router as expiration_router
from app.services.expiration import (
    register_expired_status,
    register_sweep_trigger,
    unregister_sweep_trigger,
)
from app.services.expiration.single_flight import is_running

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL)

    registry = StatusRegistry()
    register_expired_status(registry)
    app.state.status_registry = registry

    scheduler = None
    if settings.EXPIRATION_SCHEDULER_ENABLED:
        scheduler = BackgroundScheduler(timezone=settings.timezone)
        register_sweep_trigger(scheduler, site_id=settings.SITE_ID, tz=settings.timezone)
        scheduler.start()
        logger.info("[STARTUP] Expiration scheduler started")
    app.state.scheduler = scheduler

    yield

    if scheduler is not None:
        unregister_sweep_trigger(scheduler, site_id=settings.SITE_ID)
        scheduler.shutdown(wait=False)
        logger.info("[SHUTDOWN] Expiration scheduler stopped")


app = FastAPI(title="Content Expiration", lifespan=lifespan)

app.include_router(expiration_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "service": "content-expiration",
        "sweep_running": is_running(),
    }
