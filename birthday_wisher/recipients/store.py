"""Recipient store: month/day lookup over the people collection.

Implements the pluggable ``RecipientStore`` interface.  The dispatch job
does not know which backend answered; it only sees ``Recipient`` values.

``SqlRecipientStore`` matches with ``EXTRACT(month|day FROM dob)`` so the
stored year never takes part in the comparison.  Any SQLAlchemy failure is
raised as ``StorageUnavailable``, since a partial result is never useful.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date

from sqlalchemy import extract, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from birthday_wisher.core.errors import StorageUnavailable
from birthday_wisher.db.models import Person
from birthday_wisher.recipients.models import MatchCriterion, Recipient, criteria_for

logger = logging.getLogger(__name__)


class RecipientStore(ABC):
    """Read-only query capability over registered people."""

    @abstractmethod
    def query_by_month_day(self, month: int, day: int) -> list[Recipient]:
        """Return everyone born on *month*/*day* of any year, in a stable order."""
        ...

    def recipients_for(self, today: date) -> list[Recipient]:
        """Return everyone whose birthday is celebrated on *today*.

        Exact month/day matches come first, followed by Feb-29 birthdays
        on Mar 1 of a non-leap year.
        """
        recipients: list[Recipient] = []
        for criterion in criteria_for(today):
            recipients.extend(self.query_by_month_day(criterion.month, criterion.day))
        return recipients


def _to_recipient(person: Person) -> Recipient:
    return Recipient(
        id=str(person.id),
        display_name=person.username,
        address=person.email,
        birth_date=person.dob,
    )


class SqlRecipientStore(RecipientStore):
    """``RecipientStore`` backed by the ``people`` table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def query_by_month_day(self, month: int, day: int) -> list[Recipient]:
        criterion = MatchCriterion(month=month, day=day)
        stmt = (
            select(Person)
            .where(
                extract("month", Person.dob) == criterion.month,
                extract("day", Person.dob) == criterion.day,
            )
            .order_by(Person.created_at, Person.id)
        )
        try:
            with self._session_factory() as db:
                people = db.execute(stmt).scalars().all()
                recipients = [_to_recipient(p) for p in people]
        except SQLAlchemyError as exc:
            logger.error("People store query failed for %02d/%02d: %s", month, day, exc)
            raise StorageUnavailable(f"Could not query people born on {month:02d}/{day:02d}: {exc}") from exc

        logger.debug("Matched %d people born on %02d/%02d", len(recipients), month, day)
        return recipients
