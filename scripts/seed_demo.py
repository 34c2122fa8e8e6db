#!/usr/bin/env python3
"""Seed demo data: a handful of people, two of them born today.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

import calendar
import sys
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Ensure project root is on sys.path
sys.path.insert(0, ".")

from birthday_wisher.core.settings import get_settings
from birthday_wisher.db.base import Base
from birthday_wisher.db.repositories import PersonRepository


def _born_today(year: int, today: date) -> date:
    if (today.month, today.day) == (2, 29):
        while not calendar.isleap(year):
            year -= 1
    return today.replace(year=year)


def seed(session: Session, today: date) -> None:
    """Insert demo people; skips emails that already exist."""
    repo = PersonRepository(session)

    demo_people = [
        # (username, email, dob)
        ("Ada", "ada@example.com", _born_today(1990, today)),
        ("Grace", "grace@example.com", _born_today(2001, today)),
        ("Alan", "alan@example.com", date(1950, 6, 23)),
        ("Leap Day Lou", "lou@example.com", date(1996, 2, 29)),
        ("Margaret", "margaret@example.com", date(1936, 8, 17)),
    ]

    created = 0
    for username, email, dob in demo_people:
        if repo.get_by_email(email) is not None:
            continue
        repo.create(username=username, email=email, dob=dob)
        created += 1

    session.commit()
    print(f"Seeded {created} people ({len(demo_people) - created} already present).")


def main() -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    Base.metadata.create_all(engine)

    today = datetime.now(ZoneInfo(settings.schedule_timezone)).date()
    with Session(engine) as session:
        seed(session, today)


if __name__ == "__main__":
    main()
