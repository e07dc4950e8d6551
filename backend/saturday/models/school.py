from __future__ import annotations

from typing import List

from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saturday.db.base import Base, IDMixin, TimestampMixin
from saturday.models.enums import MembershipRole


class School(IDMixin, TimestampMixin, Base):
    __tablename__ = "schools"

    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    memberships: Mapped[List["SchoolMembership"]] = relationship(
        back_populates="school",
        cascade="all, delete-orphan",
    )
    organizations: Mapped[List["Organization"]] = relationship(back_populates="school")


class SchoolMembership(IDMixin, TimestampMixin, Base):
    __tablename__ = "school_memberships"
    __table_args__ = (UniqueConstraint("school_id", "user_id", name="uq_school_memberships_school_user"),)

    school_id: Mapped[int] = mapped_column(ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[MembershipRole] = mapped_column(
        Enum(MembershipRole, name="membership_role", values_callable=lambda e: [m.value for m in e]),
        default=MembershipRole.MEMBER,
        nullable=False,
    )

    school: Mapped["School"] = relationship(back_populates="memberships")
    user: Mapped["User"] = relationship(back_populates="memberships")
