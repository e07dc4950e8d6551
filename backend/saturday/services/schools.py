from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from saturday.models.enums import MembershipRole
from saturday.models.school import School, SchoolMembership
from saturday.models.user import User


def get_school_by_slug(db: Session, slug: str) -> Optional[School]:
    return db.query(School).filter(School.slug == slug.strip().lower()).first()


def list_schools(db: Session, q: Optional[str] = None) -> List[School]:
    query = db.query(School)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(School.name.ilike(pattern), School.slug.ilike(pattern)))
    return query.order_by(School.name.asc()).all()


def primary_school_for_user(db: Session, user_id: int) -> Optional[School]:
    """The school a user's session is scoped to: their earliest membership."""
    membership = (
        db.query(SchoolMembership)
        .filter(SchoolMembership.user_id == user_id)
        .order_by(SchoolMembership.created_at.asc(), SchoolMembership.id.asc())
        .first()
    )
    return membership.school if membership else None


def add_membership(
    db: Session,
    *,
    school: School,
    user: User,
    role: MembershipRole = MembershipRole.MEMBER,
) -> SchoolMembership:
    membership = SchoolMembership(school=school, user=user, role=role)
    db.add(membership)
    db.flush()
    return membership


def is_member(db: Session, *, school_id: int, user_id: int) -> bool:
    return (
        db.query(SchoolMembership.id)
        .filter(SchoolMembership.school_id == school_id, SchoolMembership.user_id == user_id)
        .first()
        is not None
    )


def school_members(db: Session, *, school_id: int, exclude_user_id: Optional[int] = None) -> List[User]:
    query = (
        db.query(User)
        .join(SchoolMembership, SchoolMembership.user_id == User.id)
        .filter(SchoolMembership.school_id == school_id, User.is_active.is_(True))
    )
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.order_by(User.username.asc()).all()
