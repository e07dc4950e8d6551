from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, require_auth, require_school_access
from saturday.db.session import get_db
from saturday.models.review import Review
from saturday.models.user import User
from saturday.schemas.review import ReviewCreate, ReviewRead, UserReviewsRead
from saturday.services.pregames import get_pregame_for_user
from saturday.services.reviews import (
    average_rating,
    ensure_reviewable,
    existing_review,
    reviews_received_by,
    reviews_written_by,
)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.post("", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> ReviewRead:
    pregame = get_pregame_for_user(
        db,
        pregame_id=payload.pregame_id,
        user_id=identity.user_id,
        school_id=identity.school_id,
    )
    if not pregame:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pregame not found")
    try:
        ensure_reviewable(pregame, reviewer_id=identity.user_id, reviewee_id=payload.reviewee_id, today=date.today())
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if existing_review(db, pregame_id=pregame.id, reviewer_id=identity.user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already reviewed this pregame")

    review = Review(
        pregame_id=pregame.id,
        reviewer_id=identity.user_id,
        reviewee_id=payload.reviewee_id,
        rating=payload.rating,
        message=payload.message,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return ReviewRead.model_validate(review)


@router.get("/my-reviews", response_model=List[ReviewRead])
def my_reviews(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> List[ReviewRead]:
    return [ReviewRead.model_validate(review) for review in reviews_written_by(db, identity.user_id)]


@router.get("/user/{user_id}", response_model=UserReviewsRead)
def reviews_for_user(
    user_id: int,
    db: Session = Depends(get_db),
) -> UserReviewsRead:
    if not db.get(User, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    reviews = reviews_received_by(db, user_id)
    return UserReviewsRead(
        user_id=user_id,
        average_rating=average_rating(db, user_id),
        count=len(reviews),
        reviews=[ReviewRead.model_validate(review) for review in reviews],
    )
