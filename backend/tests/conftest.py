from __future__ import annotations

import os

os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from saturday.core.security import get_password_hash, issue_token
from saturday.core.settings import settings
from saturday.db.session import get_db
from saturday.main import app
from saturday.models import Base, School, User
from saturday.services.schools import add_membership

PASSWORD = "password1"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def school(db: Session) -> School:
    school = School(slug="test-school", name="Test University")
    db.add(school)
    db.commit()
    db.refresh(school)
    return school


@pytest.fixture()
def other_school(db: Session) -> School:
    school = School(slug="rival-college", name="Rival College")
    db.add(school)
    db.commit()
    db.refresh(school)
    return school


@pytest.fixture()
def make_user(db: Session) -> Callable[..., User]:
    def _make_user(username: str, school: Optional[School] = None, **fields) -> User:
        user = User(
            username=username,
            email=f"{username}@test.com",
            hashed_password=_PASSWORD_HASH,
            display_name=username.title(),
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db.add(user)
        db.flush()
        if school is not None:
            add_membership(db, school=school, user=user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user, school) -> User:
    return make_user("alice", school)


@pytest.fixture()
def bob(make_user, school) -> User:
    return make_user("bob", school)


@pytest.fixture()
def login_as(client: TestClient) -> Callable[[User, Optional[School]], str]:
    """Attach a freshly signed session cookie to the test client."""

    def _login_as(user: User, school: Optional[School]) -> str:
        token = issue_token(user, school)
        client.cookies.set(settings.auth_cookie_name, token)
        return token

    return _login_as
