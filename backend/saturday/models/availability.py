from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin
from saturday.models.enums import AvailabilityState


class UserAvailability(IDMixin, TimestampMixin, Base):
    __tablename__ = "user_availability"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_user_availability_user_date"),)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    state: Mapped[AvailabilityState] = mapped_column(
        Enum(AvailabilityState, name="availability_state", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    user: Mapped["User"] = relationship(back_populates="availability")
