"""FastAPI dependency injection — database sessions and service factories."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from birthday_wisher.core.settings import Settings
from birthday_wisher.db.session import get_session_factory
from birthday_wisher.dispatch.runner import DispatchRunner
from birthday_wisher.notification.notifier import Notifier
from birthday_wisher.recipients.store import RecipientStore, SqlRecipientStore
from birthday_wisher.scheduling.heartbeat import HealthProbe
from birthday_wisher.scheduling.scheduler import BirthdayScheduler


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def build_scheduler(settings: Settings, notifier: Notifier) -> BirthdayScheduler:
    """Wire store, runner and heartbeat into a scheduler from *settings*."""
    runner = DispatchRunner(notifier, pacing_seconds=settings.dispatch_pacing_seconds)
    return BirthdayScheduler(
        SqlRecipientStore(get_session_factory()),
        runner,
        hour=settings.schedule_hour,
        minute=settings.schedule_minute,
        timezone=settings.schedule_timezone,
        probe=HealthProbe(),
        heartbeat_interval_seconds=settings.heartbeat_interval_seconds,
    )


def get_recipient_store() -> RecipientStore:
    return SqlRecipientStore(get_session_factory())


def get_scheduler(request: Request) -> BirthdayScheduler:
    """Return the scheduler created by the application lifespan."""
    return request.app.state.scheduler


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
