from __future__ import annotations

import datetime as dt
from typing import List, Optional

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin


class Pregame(IDMixin, TimestampMixin, Base):
    __tablename__ = "pregames"

    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    participant_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    creator: Mapped["User"] = relationship(foreign_keys=[creator_id])
    participant: Mapped["User"] = relationship(foreign_keys=[participant_id])
    reviews: Mapped[List["Review"]] = relationship(back_populates="pregame", cascade="all, delete-orphan")

    def involves(self, user_id: int) -> bool:
        return user_id in (self.creator_id, self.participant_id)

    def other_party(self, user_id: int) -> int:
        return self.participant_id if user_id == self.creator_id else self.creator_id
