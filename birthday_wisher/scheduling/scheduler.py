"""Daily birthday scheduler.

Owns one APScheduler ``BackgroundScheduler`` with two jobs:

- the daily cron job at a fixed wall-clock time in a fixed timezone
  (default 07:00 UTC), independent of the host's local timezone
- the hourly heartbeat

Run guard
---------
The timer path and ``trigger_now()`` share one lock.  At most one
dispatch run is active at a time.  A manual trigger that arrives while a
run is in progress is rejected with ``DispatchBusy``; a timer fire in the
same situation is skipped and logged.

``shutdown()`` disarms the timer and lets an in-flight run finish.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from birthday_wisher.core.errors import DispatchBusy, StorageUnavailable
from birthday_wisher.dispatch.results import BatchResult
from birthday_wisher.dispatch.runner import DispatchRunner
from birthday_wisher.recipients.store import RecipientStore
from birthday_wisher.scheduling.heartbeat import HealthProbe

logger = logging.getLogger(__name__)

DISPATCH_JOB_ID = "send_birthday_emails"
HEARTBEAT_JOB_ID = "birthday_scheduler_heartbeat"

# A fire delayed by up to this many seconds still runs (once, with coalesce).
MISFIRE_GRACE_SECONDS = 3600


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class SchedulerStatus:
    state: SchedulerState
    armed: bool
    next_fire_time: datetime | None
    last_run: dict | None
    last_error: str | None
    last_heartbeat: dict | None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "armed": self.armed,
            "next_fire_time": self.next_fire_time.isoformat() if self.next_fire_time else None,
            "last_run": self.last_run,
            "last_error": self.last_error,
            "last_heartbeat": self.last_heartbeat,
        }


def build_daily_trigger(hour: int, minute: int, timezone: str) -> CronTrigger:
    """Cron trigger firing once a day at *hour*:*minute* in *timezone*."""
    return CronTrigger(hour=hour, minute=minute, timezone=timezone)


class BirthdayScheduler:
    """Run the birthday dispatch once a day and on demand."""

    def __init__(
        self,
        store: RecipientStore,
        runner: DispatchRunner,
        *,
        hour: int = 7,
        minute: int = 0,
        timezone: str = "UTC",
        probe: HealthProbe | None = None,
        heartbeat_interval_seconds: int = 3600,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.runner = runner
        self.hour = hour
        self.minute = minute
        self.timezone = timezone
        self.probe = probe
        self.heartbeat_interval_seconds = heartbeat_interval_seconds

        tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(tz))
        self._run_lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._last_result: BatchResult | None = None
        self._last_error: str | None = None
        self._scheduler: BackgroundScheduler | None = None

    # -- lifecycle ----------------------------------------------------------

    @property
    def armed(self) -> bool:
        return self._scheduler is not None

    def start(self) -> None:
        """Arm the daily timer (and heartbeat).  Starting twice is a no-op."""
        if self._scheduler is not None:
            logger.info("Birthday scheduler already running, skipping initialization")
            return

        scheduler = BackgroundScheduler(timezone=self.timezone)
        scheduler.add_job(
            self._run_scheduled,
            trigger=build_daily_trigger(self.hour, self.minute, self.timezone),
            id=DISPATCH_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
        )
        if self.probe is not None:
            scheduler.add_job(
                self.probe.beat,
                trigger="interval",
                seconds=self.heartbeat_interval_seconds,
                id=HEARTBEAT_JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self.probe.beat()

        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "Birthday email job scheduled for %02d:%02d %s daily",
            self.hour,
            self.minute,
            self.timezone,
        )

    def shutdown(self, wait: bool = True) -> None:
        """Disarm the timer; an in-flight run is allowed to finish."""
        if self._scheduler is None:
            return
        scheduler, self._scheduler = self._scheduler, None
        scheduler.shutdown(wait=wait)
        logger.info("Birthday email job stopped")

    # -- runs ---------------------------------------------------------------

    def trigger_now(self) -> BatchResult:
        """Run the dispatch synchronously, outside the timer.

        Raises ``DispatchBusy`` if a run is in progress and
        ``StorageUnavailable`` if today's recipients cannot be queried.
        """
        logger.info("Manually triggering birthday emails")
        return self._run_exclusive()

    def _run_scheduled(self) -> None:
        logger.info("Birthday cron job triggered at %s", self._clock().isoformat())
        try:
            self._run_exclusive()
        except DispatchBusy:
            logger.warning("Skipping scheduled birthday run: a dispatch is already in progress")
        except StorageUnavailable as exc:
            logger.error("Birthday email cron job failed to start: %s", exc)
        except Exception:
            logger.exception("Birthday email cron job failed")

    def _run_exclusive(self) -> BatchResult:
        if not self._run_lock.acquire(blocking=False):
            raise DispatchBusy("A birthday dispatch run is already in progress")
        try:
            self._state = SchedulerState.RUNNING
            today = self._clock().date()
            logger.info("Looking for users with birthdays on %02d/%02d", today.month, today.day)
            try:
                recipients = self.store.recipients_for(today)
                logger.info("Found %d users with birthdays today", len(recipients))
                result = self.runner.run(recipients)
            except Exception as exc:
                self._last_error = str(exc) or type(exc).__name__
                raise
            self._last_result = result
            self._last_error = None
            return result
        finally:
            self._state = SchedulerState.IDLE
            self._run_lock.release()

    # -- status -------------------------------------------------------------

    def next_fire_time(self) -> datetime | None:
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(DISPATCH_JOB_ID)
        return job.next_run_time if job is not None else None

    def get_status(self) -> SchedulerStatus:
        last_heartbeat = self.probe.last if self.probe is not None else None
        return SchedulerStatus(
            state=self._state,
            armed=self.armed,
            next_fire_time=self.next_fire_time(),
            last_run=self._last_result.summary() if self._last_result else None,
            last_error=self._last_error,
            last_heartbeat=last_heartbeat.to_dict() if last_heartbeat else None,
        )
