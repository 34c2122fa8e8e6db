"""GET / and GET /health — banner and liveness check."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from birthday_wisher.api.deps import get_scheduler
from birthday_wisher.core.settings import get_settings
from birthday_wisher.db.session import get_engine
from birthday_wisher.scheduling.scheduler import BirthdayScheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _database_status() -> str:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", exc)
        return "disconnected"
    return "connected"


@router.get("/", summary="Service banner")
def root() -> dict[str, object]:
    settings = get_settings()
    return {
        "success": True,
        "message": f"{settings.app_name} is running!",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health", summary="Basic health check")
def health_check(scheduler: BirthdayScheduler = Depends(get_scheduler)) -> dict[str, object]:
    settings = get_settings()
    status = scheduler.get_status()
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "database": _database_status(),
        "scheduler": {"state": status.state.value, "armed": status.armed},
        "heartbeat": status.last_heartbeat,
    }
