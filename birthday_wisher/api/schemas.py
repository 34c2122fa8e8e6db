"""Request/response models for the people endpoints."""
from __future__ import annotations

import re
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


class UserCreate(BaseModel):
    username: str = Field(min_length=2, max_length=50)
    email: str
    dob: date

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not _EMAIL_RE.match(value):
            raise ValueError("Please provide a valid email address")
        return value

    @field_validator("dob")
    @classmethod
    def _check_dob(cls, value: date) -> date:
        today = date.today()
        if value > today:
            raise ValueError("Date of birth cannot be in the future")
        if today.year - value.year < 1:
            raise ValueError("User must be at least 1 year old")
        return value


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    dob: date
    created_at: datetime | None = None


class BirthdayUser(BaseModel):
    id: str
    username: str
    email: str
    dob: date
    age: int


class BirthdayUsersResponse(BaseModel):
    date: str
    count: int
    data: list[BirthdayUser]
