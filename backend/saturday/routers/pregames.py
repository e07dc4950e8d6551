from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, require_school_access
from saturday.db.session import get_db
from saturday.models.pregame import Pregame
from saturday.schemas.pregame import PregameCreate, PregameRead, PregameUpdate
from saturday.services.activity import log_activity
from saturday.services.pregames import get_pregame_for_user, list_pregames_for_user
from saturday.services.schools import is_member

router = APIRouter(prefix="/api/pregames", tags=["pregames"])


def _get_pregame_or_404(db: Session, pregame_id: int, identity: Identity) -> Pregame:
    pregame = get_pregame_for_user(
        db,
        pregame_id=pregame_id,
        user_id=identity.user_id,
        school_id=identity.school_id,
    )
    if not pregame:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pregame not found")
    return pregame


@router.get("", response_model=List[PregameRead])
def list_my_pregames(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[PregameRead]:
    pregames = list_pregames_for_user(db, user_id=identity.user_id, school_id=identity.school_id)
    return [PregameRead.model_validate(pregame) for pregame in pregames]


@router.post("", response_model=PregameRead, status_code=status.HTTP_201_CREATED)
def schedule_pregame(
    payload: PregameCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> PregameRead:
    if payload.participant_id == identity.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot schedule a pregame with yourself")
    if not is_member(db, school_id=identity.school_id, user_id=payload.participant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    pregame = Pregame(
        school_id=identity.school_id,
        creator_id=identity.user_id,
        **payload.model_dump(),
    )
    db.add(pregame)
    db.flush()
    log_activity(
        db,
        actor_user_id=identity.user_id,
        activity_type="PREGAME_SCHEDULED",
        message="Pregame scheduled",
        payload={"pregame_id": pregame.id, "participant_id": pregame.participant_id, "date": pregame.date.isoformat()},
    )
    db.commit()
    db.refresh(pregame)
    return PregameRead.model_validate(pregame)


@router.patch("/{pregame_id}", response_model=PregameRead)
def update_pregame(
    pregame_id: int,
    payload: PregameUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> PregameRead:
    pregame = _get_pregame_or_404(db, pregame_id, identity)
    updates = payload.model_dump(exclude_unset=True)
    for field in ("date", "time"):
        if field in updates and updates[field] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be cleared")
    for field, value in updates.items():
        setattr(pregame, field, value)
    db.add(pregame)
    db.commit()
    db.refresh(pregame)
    return PregameRead.model_validate(pregame)


@router.delete("/{pregame_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_pregame(
    pregame_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> Response:
    pregame = _get_pregame_or_404(db, pregame_id, identity)
    log_activity(
        db,
        actor_user_id=identity.user_id,
        activity_type="PREGAME_CANCELLED",
        message="Pregame cancelled",
        payload={"pregame_id": pregame.id},
    )
    db.delete(pregame)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
