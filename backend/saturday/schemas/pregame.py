from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from saturday.schemas.base import ORMModel

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_time(value: Optional[str]) -> Optional[str]:
    if value is not None and not _TIME_PATTERN.match(value):
        raise ValueError("time must be HH:MM (24h)")
    return value


class PregameCreate(BaseModel):
    participant_id: int
    date: dt.date
    time: str
    location: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return _validate_time(value)


class PregameUpdate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None

    @field_validator("time")
    @classmethod
    def check_time(cls, value: Optional[str]) -> Optional[str]:
        return _validate_time(value)


class PregameRead(ORMModel):
    id: int
    school_id: int
    creator_id: int
    participant_id: int
    date: dt.date
    time: str
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
