from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, require_school_access
from saturday.core.observability import availability_mutations_total
from saturday.core.settings import settings
from saturday.db.session import get_db
from saturday.schemas.availability import AvailabilityRead, AvailabilityUpdate
from saturday.services.availability import delete_availability, list_availability, upsert_availability
from saturday.services.calendar import default_window

router = APIRouter(prefix="/api/availability", tags=["availability"])


@router.get("", response_model=List[AvailabilityRead])
def get_availability(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[AvailabilityRead]:
    window_start, window_end = default_window(date.today(), settings.availability_window_months)
    start = start_date or window_start
    end = end_date or window_end
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="startDate must be on or before endDate")
    records = list_availability(db, user_id=identity.user_id, start=start, end=end)
    return [AvailabilityRead.model_validate(record) for record in records]


@router.patch("/{day}", response_model=AvailabilityRead)
def set_availability(
    day: date,
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> AvailabilityRead:
    try:
        record = upsert_availability(db, user_id=identity.user_id, day=day, state=payload.state)
        db.commit()
    except IntegrityError:
        # Lost an insert race on (user_id, date); the row exists now.
        db.rollback()
        record = upsert_availability(db, user_id=identity.user_id, day=day, state=payload.state)
        db.commit()
    db.refresh(record)
    availability_mutations_total.labels(operation="upsert").inc()
    return AvailabilityRead.model_validate(record)


@router.delete("/{day}", status_code=status.HTTP_204_NO_CONTENT)
def clear_availability(
    day: date,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> Response:
    if delete_availability(db, user_id=identity.user_id, day=day):
        db.commit()
    availability_mutations_total.labels(operation="delete").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
