"""Dispatch runner: send one birthday email per recipient, sequentially.

Failure isolation
-----------------
A failed send is recorded as a ``FAILED`` outcome and the loop moves on
to the next recipient.  Nothing raised by ``Notifier.send`` escapes
``run()``.

Pacing
------
``pacing_seconds`` is slept between consecutive send attempts (never
before the first one) to stay under transport rate limits.  The sleep
function is injectable so tests can observe pacing without waiting.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from birthday_wisher.core.errors import DeliveryError
from birthday_wisher.dispatch.results import BatchResult, DispatchOutcome
from birthday_wisher.notification.notifier import Notifier
from birthday_wisher.recipients.models import Recipient

logger = logging.getLogger(__name__)

DEFAULT_PACING_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispatchRunner:
    """Deliver birthday emails to a list of recipients."""

    def __init__(
        self,
        notifier: Notifier,
        pacing_seconds: float = DEFAULT_PACING_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if pacing_seconds < 0:
            raise ValueError("pacing_seconds must be >= 0")
        self.notifier = notifier
        self.pacing_seconds = pacing_seconds
        self._sleep = sleep
        self._clock = clock

    def run(self, recipients: Sequence[Recipient]) -> BatchResult:
        """Send to every recipient in order and return the aggregated result."""
        run_at = self._clock()
        if not recipients:
            logger.info("No birthday recipients for this run")
            return BatchResult(run_at=run_at, total=0)

        outcomes: list[DispatchOutcome] = []
        for i, recipient in enumerate(recipients):
            if i > 0 and self.pacing_seconds > 0:
                self._sleep(self.pacing_seconds)
            outcomes.append(self._dispatch_one(recipient))

        result = BatchResult(run_at=run_at, total=len(recipients), outcomes=tuple(outcomes))
        logger.info(
            "Birthday email run completed: total=%d sent=%d failed=%d",
            result.total,
            result.sent,
            result.failed,
        )
        for failure in result.failures:
            logger.warning("Recipient %s not notified: %s", failure.recipient_id, failure.failure_reason)
        return result

    def _dispatch_one(self, recipient: Recipient) -> DispatchOutcome:
        try:
            delivery_id = self.notifier.send(recipient.address, recipient.display_name)
        except DeliveryError as exc:
            logger.error("Failed to send birthday email to recipient %s: %s", recipient.id, exc)
            return DispatchOutcome.failed(recipient, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error sending birthday email to recipient %s", recipient.id)
            return DispatchOutcome.failed(recipient, str(exc) or type(exc).__name__)

        logger.info("Birthday email sent to recipient %s (%s)", recipient.id, recipient.display_name)
        return DispatchOutcome.sent(recipient, delivery_id)
