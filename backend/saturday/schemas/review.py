from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from saturday.schemas.base import ORMModel


class ReviewCreate(BaseModel):
    pregame_id: int
    reviewee_id: int
    rating: int = Field(..., ge=1, le=5)
    message: Optional[str] = Field(default=None, max_length=2000)


class ReviewRead(ORMModel):
    id: int
    pregame_id: int
    reviewer_id: int
    reviewee_id: int
    rating: int
    message: Optional[str] = None
    created_at: datetime


class UserReviewsRead(BaseModel):
    user_id: int
    average_rating: Optional[float] = None
    count: int
    reviews: List[ReviewRead]
