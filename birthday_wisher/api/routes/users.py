"""People registration and today's birthday lookup.

POST /users           — register a person (409 on duplicate email)
GET  /users           — list registered people
GET  /users/birthdays — people celebrating today in the scheduler timezone
"""
from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from birthday_wisher.api.deps import get_db, get_recipient_store
from birthday_wisher.api.schemas import BirthdayUser, BirthdayUsersResponse, UserCreate, UserRead
from birthday_wisher.core.errors import StorageUnavailable
from birthday_wisher.core.settings import get_settings
from birthday_wisher.db.repositories import PersonRepository
from birthday_wisher.recipients.store import RecipientStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> UserRead:
    repo = PersonRepository(db)
    if repo.get_by_email(payload.email) is not None:
        logger.warning("Duplicate email attempt: %s", payload.email)
        raise HTTPException(status_code=409, detail="User with this email already exists")

    try:
        person = repo.create(username=payload.username, email=payload.email, dob=payload.dob)
        db.refresh(person)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="User with this email already exists")

    logger.info("New user created: %s", person.id)
    return UserRead.model_validate(person)


@router.get("", response_model=list[UserRead])
def list_users(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> list[UserRead]:
    people = PersonRepository(db).list(limit=limit, offset=offset)
    logger.info("Retrieved %d users", len(people))
    return [UserRead.model_validate(p) for p in people]


@router.get("/birthdays", response_model=BirthdayUsersResponse)
def birthday_users(store: RecipientStore = Depends(get_recipient_store)) -> BirthdayUsersResponse:
    today = datetime.now(ZoneInfo(get_settings().schedule_timezone)).date()
    try:
        recipients = store.recipients_for(today)
    except StorageUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    logger.info("Retrieved %d birthday users for %s", len(recipients), today.isoformat())
    return BirthdayUsersResponse(
        date=today.isoformat(),
        count=len(recipients),
        data=[
            BirthdayUser(
                id=r.id,
                username=r.display_name,
                email=r.address,
                dob=r.birth_date,
                age=r.age_on(today),
            )
            for r in recipients
        ],
    )
