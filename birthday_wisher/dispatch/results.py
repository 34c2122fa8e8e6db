"""Per-recipient outcomes and the batch result of one dispatch run."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from birthday_wisher.recipients.models import Recipient


class DispatchStatus(str, Enum):
    SENT = "SENT"
    FAILED = "FAILED"


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one send attempt for one recipient."""

    recipient_id: str
    address: str
    display_name: str
    status: DispatchStatus
    delivery_id: str | None = None
    failure_reason: str | None = None

    @classmethod
    def sent(cls, recipient: Recipient, delivery_id: str) -> DispatchOutcome:
        return cls(
            recipient_id=recipient.id,
            address=recipient.address,
            display_name=recipient.display_name,
            status=DispatchStatus.SENT,
            delivery_id=delivery_id,
        )

    @classmethod
    def failed(cls, recipient: Recipient, reason: str) -> DispatchOutcome:
        return cls(
            recipient_id=recipient.id,
            address=recipient.address,
            display_name=recipient.display_name,
            status=DispatchStatus.FAILED,
            failure_reason=reason,
        )

    def to_dict(self) -> dict[str, str | None]:
        return {
            "recipient_id": self.recipient_id,
            "address": self.address,
            "display_name": self.display_name,
            "status": self.status.value,
            "delivery_id": self.delivery_id,
            "failure_reason": self.failure_reason,
        }


@dataclass(frozen=True)
class BatchResult:
    """All outcomes of one dispatch run, in dispatch order."""

    run_at: datetime
    total: int
    outcomes: tuple[DispatchOutcome, ...] = ()

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.status is DispatchStatus.SENT)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status is DispatchStatus.FAILED)

    @property
    def failures(self) -> list[DispatchOutcome]:
        return [o for o in self.outcomes if o.status is DispatchStatus.FAILED]

    def summary(self) -> dict:
        return {
            "run_at": self.run_at.isoformat(),
            "total": self.total,
            "sent": self.sent,
            "failed": self.failed,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
