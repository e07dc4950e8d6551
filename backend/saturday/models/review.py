from __future__ import annotations

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin


class Review(IDMixin, TimestampMixin, Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("pregame_id", "reviewer_id", name="uq_reviews_pregame_reviewer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
    )

    pregame_id: Mapped[int] = mapped_column(ForeignKey("pregames.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    reviewee_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    pregame: Mapped["Pregame"] = relationship(back_populates="reviews")
