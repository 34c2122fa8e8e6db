"""Tests for birthday_wisher/recipients — month/day matching and the SQL store."""
from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from birthday_wisher.core.errors import StorageUnavailable
from birthday_wisher.recipients import MatchCriterion, Recipient, SqlRecipientStore, criteria_for


# ===========================================================================
# MatchCriterion / criteria_for
# ===========================================================================

class TestMatchCriterion:
    @pytest.mark.parametrize("month,day", [(0, 1), (13, 1), (1, 0), (1, 32)])
    def test_out_of_range_rejected(self, month, day):
        with pytest.raises(ValueError):
            MatchCriterion(month=month, day=day)

    def test_matches_ignores_year(self):
        criterion = MatchCriterion.from_date(date(2026, 3, 15))
        assert criterion.matches(date(1990, 3, 15))
        assert criterion.matches(date(2001, 3, 15))
        assert not criterion.matches(date(1990, 3, 16))
        assert not criterion.matches(date(1990, 4, 15))


class TestLeapDayPolicy:
    def test_regular_day_has_single_criterion(self):
        assert criteria_for(date(2026, 3, 15)) == [MatchCriterion(3, 15)]

    def test_march_first_of_non_leap_year_includes_leap_day(self):
        assert criteria_for(date(2026, 3, 1)) == [MatchCriterion(3, 1), MatchCriterion(2, 29)]

    def test_march_first_of_leap_year_does_not_include_leap_day(self):
        assert criteria_for(date(2028, 3, 1)) == [MatchCriterion(3, 1)]

    def test_leap_day_in_leap_year(self):
        assert criteria_for(date(2028, 2, 29)) == [MatchCriterion(2, 29)]

    def test_leap_day_recipient(self):
        lou = Recipient(id="1", display_name="Lou", address="lou@example.com", birth_date=date(1996, 2, 29))
        assert lou.is_birthday_on(date(2026, 3, 1))
        assert lou.is_birthday_on(date(2028, 2, 29))
        assert not lou.is_birthday_on(date(2028, 3, 1))
        assert not lou.is_birthday_on(date(2026, 2, 28))


class TestRecipientAge:
    def test_age_before_and_on_birthday(self):
        ada = Recipient(id="1", display_name="Ada", address="ada@example.com", birth_date=date(1990, 3, 15))
        assert ada.age_on(date(2026, 3, 14)) == 35
        assert ada.age_on(date(2026, 3, 15)) == 36


# ===========================================================================
# SqlRecipientStore
# ===========================================================================

@pytest.fixture()
def store(session_factory) -> SqlRecipientStore:
    return SqlRecipientStore(session_factory)


class TestSqlRecipientStore:
    def test_matches_month_and_day_regardless_of_year(self, store, add_person):
        ada_id = add_person("Ada", date(1990, 3, 15))
        grace_id = add_person("Grace", date(2001, 3, 15))
        add_person("Alan", date(1950, 6, 23))

        matched = store.query_by_month_day(3, 15)

        assert {r.display_name for r in matched} == {"Ada", "Grace"}
        assert {r.id for r in matched} == {ada_id, grace_id}

    def test_non_matching_people_are_excluded(self, store, add_person):
        add_person("Ada", date(1990, 3, 15))
        add_person("Alan", date(1950, 6, 23))

        assert [r.display_name for r in store.query_by_month_day(6, 23)] == ["Alan"]
        assert store.query_by_month_day(3, 16) == []
        assert store.query_by_month_day(4, 15) == []

    def test_empty_store_returns_empty_list(self, store):
        assert store.query_by_month_day(1, 1) == []

    def test_recipient_fields(self, store, add_person):
        ada_id = add_person("Ada", date(1990, 3, 15), email="ada@example.com")

        [ada] = store.query_by_month_day(3, 15)

        assert ada == Recipient(
            id=ada_id,
            display_name="Ada",
            address="ada@example.com",
            birth_date=date(1990, 3, 15),
        )

    def test_order_is_stable_across_queries(self, store, add_person):
        for i in range(5):
            add_person(f"Person{i}", date(1980 + i, 7, 4))

        first = [r.id for r in store.query_by_month_day(7, 4)]
        second = [r.id for r in store.query_by_month_day(7, 4)]

        assert first == second
        assert len(first) == 5

    def test_recipients_for_adds_leap_day_birthdays_on_march_first(self, store, add_person):
        add_person("March", date(1985, 3, 1))
        add_person("Lou", date(1996, 2, 29))

        non_leap = [r.display_name for r in store.recipients_for(date(2026, 3, 1))]
        leap = [r.display_name for r in store.recipients_for(date(2028, 3, 1))]

        assert non_leap == ["March", "Lou"]
        assert leap == ["March"]

    def test_invalid_month_rejected(self, store):
        with pytest.raises(ValueError):
            store.query_by_month_day(13, 1)

    def test_storage_failure_raises_storage_unavailable(self):
        # No tables created: every query fails at the database.
        engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        broken = SqlRecipientStore(sessionmaker(bind=engine))

        with pytest.raises(StorageUnavailable):
            broken.query_by_month_day(3, 15)
