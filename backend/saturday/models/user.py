from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin


class User(IDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gallery_images: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    group_size_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    group_size_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    preferences: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    memberships: Mapped[List["SchoolMembership"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
    availability: Mapped[List["UserAvailability"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
    messages_sent: Mapped[List["Message"]] = relationship(back_populates="sender")
