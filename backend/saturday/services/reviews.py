from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from saturday.models.pregame import Pregame
from saturday.models.review import Review


def ensure_reviewable(pregame: Pregame, *, reviewer_id: int, reviewee_id: int, today: date) -> None:
    """Raise PermissionError or ValueError when the review is not allowed."""
    if not pregame.involves(reviewer_id):
        raise PermissionError("Only participants of the pregame can review it")
    if reviewee_id != pregame.other_party(reviewer_id) or reviewee_id == reviewer_id:
        raise ValueError("You can only review the other participant of the pregame")
    if pregame.date > today:
        raise ValueError("Pregame has not happened yet")


def existing_review(db: Session, *, pregame_id: int, reviewer_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .filter(Review.pregame_id == pregame_id, Review.reviewer_id == reviewer_id)
        .first()
    )


def reviews_written_by(db: Session, user_id: int) -> List[Review]:
    return db.query(Review).filter(Review.reviewer_id == user_id).order_by(Review.created_at.desc()).all()


def reviews_received_by(db: Session, user_id: int) -> List[Review]:
    return db.query(Review).filter(Review.reviewee_id == user_id).order_by(Review.created_at.desc()).all()


def average_rating(db: Session, user_id: int) -> Optional[float]:
    value = db.query(func.avg(Review.rating)).filter(Review.reviewee_id == user_id).scalar()
    return round(float(value), 2) if value is not None else None
