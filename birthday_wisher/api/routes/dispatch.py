"""Dispatch control surface.

POST /trigger-birthday-emails — run today's dispatch now and return the batch
GET  /scheduler/status        — scheduler state and last run summary
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from birthday_wisher.api.deps import get_scheduler
from birthday_wisher.core.errors import DispatchBusy, StorageUnavailable
from birthday_wisher.scheduling.scheduler import BirthdayScheduler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dispatch"])


@router.post("/trigger-birthday-emails", summary="Run today's birthday dispatch now")
def trigger_birthday_emails(scheduler: BirthdayScheduler = Depends(get_scheduler)) -> dict:
    try:
        result = scheduler.trigger_now()
    except DispatchBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except StorageUnavailable as exc:
        logger.error("Failed to trigger birthday emails: %s", exc)
        raise HTTPException(status_code=503, detail="Failed to trigger birthday emails: storage unavailable")

    return {"success": True, **result.summary()}


@router.get("/scheduler/status", summary="Scheduler state")
def scheduler_status(scheduler: BirthdayScheduler = Depends(get_scheduler)) -> dict:
    return scheduler.get_status().to_dict()
