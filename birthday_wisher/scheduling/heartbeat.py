"""Liveness heartbeat for the scheduler's timer loop.

The scheduler calls ``HealthProbe.beat()`` from its own interval job, so a
recent heartbeat proves the timer thread is still firing.  Dispatch
outcomes play no part in it.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Heartbeat:
    timestamp: datetime
    status: str = "alive"

    def to_dict(self) -> dict[str, str]:
        return {"status": self.status, "timestamp": self.timestamp.isoformat()}


class HealthProbe:
    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last: Heartbeat | None = None

    def beat(self) -> Heartbeat:
        heartbeat = Heartbeat(timestamp=self._clock())
        with self._lock:
            self._last = heartbeat
        logger.info("Birthday scheduler status check - still running (%s)", heartbeat.timestamp.isoformat())
        return heartbeat

    @property
    def last(self) -> Heartbeat | None:
        with self._lock:
            return self._last
