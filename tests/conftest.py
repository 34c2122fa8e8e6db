from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from birthday_wisher.core.errors import DeliveryError
from birthday_wisher.db.base import Base
from birthday_wisher.db.models import Person
from birthday_wisher.notification.notifier import Notifier


@pytest.fixture()
def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def add_person(session_factory):
    """Insert a Person row and return its id as a string."""

    def _add(username: str, dob: date, email: str | None = None) -> str:
        with session_factory() as db:
            person = Person(
                id=uuid4(),
                username=username,
                email=email or f"{username.lower()}@example.com",
                dob=dob,
            )
            db.add(person)
            db.commit()
            return str(person.id)

    return _add


class RecordingNotifier(Notifier):
    """Notifier double: records every send and fails for selected addresses."""

    def __init__(self, fail_for: set[str] | None = None, configured: bool = True) -> None:
        self.fail_for = fail_for or set()
        self.configured = configured
        self.calls: list[tuple[str, str]] = []

    def send(self, address: str, display_name: str) -> str:
        self.calls.append((address, display_name))
        if address in self.fail_for:
            raise DeliveryError(address, "mailbox unavailable")
        return f"<{len(self.calls)}@test>"

    def verify_configuration(self) -> bool:
        return self.configured


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(engine, session_factory, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    monkeypatch.setenv("SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("NOTIFIER_TRANSPORT", "log")
    monkeypatch.setenv("DISPATCH_PACING_SECONDS", "0")

    from birthday_wisher.core.settings import get_settings
    from birthday_wisher.db import session as db_session

    get_settings.cache_clear()
    monkeypatch.setattr(db_session, "_engine", engine)
    monkeypatch.setattr(db_session, "_session_factory", session_factory)

    from birthday_wisher.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_settings.cache_clear()
