"""Recipient value objects and month/day matching.

Leap-day policy
---------------
People born on Feb 29 are celebrated on Mar 1 in non-leap years and on
Feb 29 in leap years.  ``criteria_for(today)`` therefore yields one
criterion on most days and two on Mar 1 of a non-leap year.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

_LEAP_DAY = (2, 29)
_LEAP_DAY_STANDIN = (3, 1)


@dataclass(frozen=True)
class MatchCriterion:
    """Month and day of a birth date; the year is ignored."""

    month: int
    day: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in [1, 12]; got {self.month!r}")
        if not 1 <= self.day <= 31:
            raise ValueError(f"day must be in [1, 31]; got {self.day!r}")

    @classmethod
    def from_date(cls, value: date) -> MatchCriterion:
        return cls(month=value.month, day=value.day)

    def matches(self, birth_date: date) -> bool:
        return birth_date.month == self.month and birth_date.day == self.day


def criteria_for(today: date) -> list[MatchCriterion]:
    """Return the month/day criteria whose birthdays are celebrated on *today*."""
    criteria = [MatchCriterion.from_date(today)]
    if (today.month, today.day) == _LEAP_DAY_STANDIN and not calendar.isleap(today.year):
        criteria.append(MatchCriterion(*_LEAP_DAY))
    return criteria


@dataclass(frozen=True)
class Recipient:
    """A person as seen by the dispatch job."""

    id: str
    display_name: str
    address: str
    birth_date: date

    def age_on(self, today: date) -> int:
        """Completed years on *today*."""
        age = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            age -= 1
        return age

    def is_birthday_on(self, today: date) -> bool:
        return any(c.matches(self.birth_date) for c in criteria_for(today))
