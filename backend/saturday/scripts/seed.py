"""Create a test school with two members (alice, bob) for multi-account testing.

Safe to run repeatedly: existing rows are updated rather than duplicated.
"""
from __future__ import annotations

import argparse

from sqlalchemy.orm import Session

import saturday.models  # noqa: F401
from saturday.core.security import get_password_hash
from saturday.core.settings import settings
from saturday.db.session import SessionLocal
from saturday.models.school import School
from saturday.models.user import User
from saturday.services.schools import add_membership, is_member

TEST_SCHOOL_SLUG = "test-school"
TEST_SCHOOL_NAME = "Test University"

TEST_USERS = (
    {"username": "alice", "email": "alice@test.com", "display_name": "Alice Test"},
    {"username": "bob", "email": "bob@test.com", "display_name": "Bob Test"},
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a test school and two users.")
    parser.add_argument("--password", default="password1", help="Password set on every seeded user")
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow running in production (not recommended).",
    )
    return parser.parse_args()


def seed(db: Session, *, password: str) -> dict[str, list[str]]:
    summary: dict[str, list[str]] = {"created": [], "updated": []}

    school = db.query(School).filter(School.slug == TEST_SCHOOL_SLUG).first()
    if not school:
        school = School(slug=TEST_SCHOOL_SLUG, name=TEST_SCHOOL_NAME)
        db.add(school)
        db.flush()
        summary["created"].append(f"school:{school.slug}")

    hashed = get_password_hash(password)
    for data in TEST_USERS:
        user = db.query(User).filter(User.username == data["username"]).first()
        if user:
            user.hashed_password = hashed
            user.is_active = True
            summary["updated"].append(f"user:{user.username}")
        else:
            user = User(hashed_password=hashed, is_active=True, **data)
            summary["created"].append(f"user:{data['username']}")
        db.add(user)
        db.flush()
        if not is_member(db, school_id=school.id, user_id=user.id):
            add_membership(db, school=school, user=user)

    db.commit()
    return summary


def main() -> None:
    args = parse_args()
    if settings.is_production and not args.allow_production:
        raise RuntimeError("Refusing to run in production without --allow-production")

    with SessionLocal() as db:
        summary = seed(db, password=args.password)

    for label in summary["created"]:
        print(f"created {label}")
    for label in summary["updated"]:
        print(f"updated {label}")
    print(f"login as alice or bob at school '{TEST_SCHOOL_SLUG}'")


if __name__ == "__main__":
    main()
