from __future__ import annotations

from saturday.core.security import verify_password
from saturday.models import School, SchoolMembership, User
from saturday.scripts.seed import TEST_SCHOOL_SLUG, seed


def test_seed_is_idempotent(db):
    first = seed(db, password="password1")
    assert "school:test-school" in first["created"]
    assert {"user:alice", "user:bob"} <= set(first["created"])

    second = seed(db, password="changed123")
    assert second["created"] == []
    assert set(second["updated"]) == {"user:alice", "user:bob"}

    school = db.query(School).filter(School.slug == TEST_SCHOOL_SLUG).one()
    assert db.query(SchoolMembership).filter(SchoolMembership.school_id == school.id).count() == 2
    alice = db.query(User).filter(User.username == "alice").one()
    assert verify_password("changed123", alice.hashed_password)
