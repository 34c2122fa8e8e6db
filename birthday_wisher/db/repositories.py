from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from birthday_wisher.db.models import Person


class PersonRepository:
    """Registration-side access to the ``people`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, *, username: str, email: str, dob) -> Person:
        person = Person(username=username, email=email.strip().lower(), dob=dob)
        self.db.add(person)
        self.db.flush()
        return person

    def get_by_email(self, email: str) -> Person | None:
        stmt = select(Person).where(Person.email == email.strip().lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list(self, limit: int = 100, offset: int = 0) -> list[Person]:
        stmt = select(Person).order_by(Person.created_at, Person.id).offset(offset).limit(limit)
        return self.db.execute(stmt).scalars().all()
