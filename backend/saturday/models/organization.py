from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin


class Organization(IDMixin, TimestampMixin, Base):
    __tablename__ = "organizations"

    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    member_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    group_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    established_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    social_media: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    school: Mapped["School"] = relationship(back_populates="organizations")
