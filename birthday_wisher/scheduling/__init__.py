from birthday_wisher.scheduling.heartbeat import Heartbeat, HealthProbe
from birthday_wisher.scheduling.scheduler import (
    BirthdayScheduler,
    SchedulerState,
    SchedulerStatus,
    build_daily_trigger,
)

__all__ = [
    "BirthdayScheduler",
    "HealthProbe",
    "Heartbeat",
    "SchedulerState",
    "SchedulerStatus",
    "build_daily_trigger",
]
