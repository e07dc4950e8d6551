from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from saturday.models.pregame import Pregame


def list_pregames_for_user(db: Session, *, user_id: int, school_id: int) -> List[Pregame]:
    return (
        db.query(Pregame)
        .filter(
            Pregame.school_id == school_id,
            or_(Pregame.creator_id == user_id, Pregame.participant_id == user_id),
        )
        .order_by(Pregame.date.asc(), Pregame.time.asc())
        .all()
    )


def get_pregame_for_user(db: Session, *, pregame_id: int, user_id: int, school_id: int) -> Optional[Pregame]:
    """Load a pregame the caller takes part in; anything else reads as missing."""
    pregame = db.get(Pregame, pregame_id)
    if not pregame or pregame.school_id != school_id or not pregame.involves(user_id):
        return None
    return pregame
