"""Birthday recipients: the read-only view of the people table.

``RecipientStore`` answers one question, "who was born on this month and
day?", and ``recipients_for`` layers the Feb-29 policy on top of it.
"""
from birthday_wisher.recipients.models import MatchCriterion, Recipient, criteria_for
from birthday_wisher.recipients.store import RecipientStore, SqlRecipientStore

__all__ = [
    "MatchCriterion",
    "Recipient",
    "RecipientStore",
    "SqlRecipientStore",
    "criteria_for",
]
