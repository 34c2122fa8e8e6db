"""FastAPI application factory.

Assembles CORS and all API routers, and owns the scheduler lifecycle.
This module is the authoritative app object — birthday_wisher/main.py
re-exports it.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from birthday_wisher.api.deps import build_scheduler
from birthday_wisher.api.routes.diagnostic import router as diagnostic_router
from birthday_wisher.api.routes.dispatch import router as dispatch_router
from birthday_wisher.api.routes.health import router as health_router
from birthday_wisher.api.routes.users import router as users_router
from birthday_wisher.core.errors import ConfigurationInvalid
from birthday_wisher.core.logging import setup_logging
from birthday_wisher.core.settings import get_settings
from birthday_wisher.db.base import Base
from birthday_wisher.db.session import get_engine
from birthday_wisher.notification.notifier import build_notifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    settings = get_settings()
    Base.metadata.create_all(bind=get_engine())

    notifier = build_notifier(settings)
    try:
        notifier.ensure_configured()
    except ConfigurationInvalid as exc:
        logger.warning("Email configuration is invalid. Birthday emails may not work properly: %s", exc)

    scheduler = build_scheduler(settings, notifier)
    app.state.notifier = notifier
    app.state.scheduler = scheduler
    if settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Birthday scheduler disabled via settings (SCHEDULER_ENABLED=false)")

    yield

    scheduler.shutdown(wait=True)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(users_router)
app.include_router(dispatch_router)
app.include_router(diagnostic_router)
