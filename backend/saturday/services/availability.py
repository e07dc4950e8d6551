from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from saturday.models.availability import UserAvailability
from saturday.models.enums import AvailabilityState


def list_availability(db: Session, *, user_id: int, start: date, end: date) -> List[UserAvailability]:
    return (
        db.query(UserAvailability)
        .filter(
            UserAvailability.user_id == user_id,
            UserAvailability.date >= start,
            UserAvailability.date <= end,
        )
        .order_by(UserAvailability.date.asc())
        .all()
    )


def get_availability(db: Session, *, user_id: int, day: date) -> Optional[UserAvailability]:
    return (
        db.query(UserAvailability)
        .filter(UserAvailability.user_id == user_id, UserAvailability.date == day)
        .first()
    )


def upsert_availability(db: Session, *, user_id: int, day: date, state: AvailabilityState) -> UserAvailability:
    record = get_availability(db, user_id=user_id, day=day)
    if record:
        record.state = state
    else:
        record = UserAvailability(user_id=user_id, date=day, state=state)
    db.add(record)
    db.flush()
    return record


def delete_availability(db: Session, *, user_id: int, day: date) -> bool:
    record = get_availability(db, user_id=user_id, day=day)
    if not record:
        return False
    db.delete(record)
    db.flush()
    return True
