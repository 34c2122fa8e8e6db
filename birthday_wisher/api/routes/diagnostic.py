"""GET /test-email — check the email transport without sending anything."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from birthday_wisher.api.deps import get_notifier
from birthday_wisher.notification.notifier import Notifier

router = APIRouter(tags=["diagnostic"])


@router.get("/test-email", summary="Verify email configuration")
def test_email(notifier: Notifier = Depends(get_notifier)) -> JSONResponse:
    if notifier.verify_configuration():
        return JSONResponse({"success": True, "message": "Email configuration is valid"})
    return JSONResponse(
        {"success": False, "message": "Email configuration is invalid"},
        status_code=500,
    )
