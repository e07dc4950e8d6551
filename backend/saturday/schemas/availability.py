from __future__ import annotations

import datetime as dt

from pydantic import BaseModel

from saturday.models.enums import AvailabilityState
from saturday.schemas.base import ORMModel


class AvailabilityUpdate(BaseModel):
    state: AvailabilityState


class AvailabilityRead(ORMModel):
    user_id: int
    date: dt.date
    state: AvailabilityState
    created_at: dt.datetime
    updated_at: dt.datetime
