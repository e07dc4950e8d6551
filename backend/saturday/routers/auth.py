from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, optional_auth
from saturday.core.logging import log_auth_event
from saturday.core.security import clear_auth_cookie, get_password_hash, issue_token, set_auth_cookie, verify_password
from saturday.core.settings import settings
from saturday.db.session import get_db
from saturday.models.school import School
from saturday.models.user import User
from saturday.schemas.auth import AuthResponse, LoginRequest
from saturday.schemas.school import SchoolRead
from saturday.schemas.user import UserCreate, UserRead
from saturday.services.activity import count_matching, log_activity, recent_activity
from saturday.services.schools import add_membership, get_school_by_slug, primary_school_for_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _login_rate_limited(db: Session, *, login: str, client_ip: str) -> bool:
    window_start = datetime.now(timezone.utc) - timedelta(minutes=settings.login_window_minutes)
    recent = recent_activity(db, activity_type="USER_LOGIN_FAILED", since=window_start)
    return count_matching(recent, login=login, ip=client_ip) >= settings.login_max_attempts


def _auth_response(
    user: User,
    school: Optional[School],
    *,
    request: Request,
    response: Response,
) -> AuthResponse:
    token = issue_token(user, school)
    set_auth_cookie(response, token, request)
    return AuthResponse(
        user=UserRead.model_validate(user),
        school=SchoolRead.model_validate(school) if school else None,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> AuthResponse:
    school = get_school_by_slug(db, payload.school_slug)
    if not school:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown school")
    if db.query(User).filter(User.username == payload.username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    profile = payload.model_dump(exclude={"username", "email", "password", "school_slug"}, exclude_unset=True)
    user = User(
        username=payload.username,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        is_active=True,
        **profile,
    )
    db.add(user)
    db.flush()
    add_membership(db, school=school, user=user)
    log_activity(
        db,
        actor_user_id=user.id,
        activity_type="USER_REGISTERED",
        message="User registered",
        payload={"school_id": school.id},
    )
    db.commit()
    db.refresh(user)
    log_auth_event("registered", request=request, extra={"user_id": user.id, "school_id": school.id})
    return _auth_response(user, school, request=request, response=response)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> AuthResponse:
    login_name = payload.email.strip()
    lowered = login_name.lower()
    client_ip = request.client.host if request.client else "unknown"
    user = db.query(User).filter(or_(User.email == lowered, User.username == login_name)).first()
    password_valid = bool(user and verify_password(payload.password, user.hashed_password))
    rate_limited = _login_rate_limited(db, login=lowered, client_ip=client_ip)

    if rate_limited and not password_valid:
        log_activity(
            db,
            actor_user_id=None,
            activity_type="USER_LOGIN_RATE_LIMIT",
            message="Login rate limited",
            payload={"login": lowered, "ip": client_ip},
        )
        db.commit()
        log_auth_event("login_rate_limited", request=request, extra={"login": lowered})
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many login attempts")
    if not password_valid:
        log_activity(
            db,
            actor_user_id=None,
            activity_type="USER_LOGIN_FAILED",
            message="Login failed",
            payload={"login": lowered, "ip": client_ip},
        )
        db.commit()
        log_auth_event("login_failed", request=request, extra={"login": lowered})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        log_auth_event("login_inactive", request=request, extra={"user_id": user.id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")

    now = datetime.now(timezone.utc)
    user.last_login_at = now
    db.add(user)
    log_activity(
        db,
        actor_user_id=user.id,
        activity_type="USER_LOGIN",
        message="User logged in",
        payload={"at": now.isoformat()},
    )
    db.commit()
    db.refresh(user)

    school = primary_school_for_user(db, user.id)
    if school is None:
        log_auth_event("login_without_school", request=request, extra={"user_id": user.id})
    return _auth_response(user, school, request=request, response=response)


@router.post("/logout")
def logout(request: Request, response: Response) -> dict:
    clear_auth_cookie(response, request)
    return {"message": "Logged out"}


@router.get("/me", response_model=AuthResponse)
def me(
    identity: Optional[Identity] = Depends(optional_auth),
    db: Session = Depends(get_db),
) -> AuthResponse:
    if identity is None:
        return AuthResponse()
    user = db.get(User, identity.user_id)
    if not user or not user.is_active:
        return AuthResponse()
    school = db.get(School, identity.school_id) if identity.school_id is not None else None
    return AuthResponse(
        user=UserRead.model_validate(user),
        school=SchoolRead.model_validate(school) if school else None,
    )
