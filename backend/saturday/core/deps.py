from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from saturday.core.logging import log_auth_event
from saturday.core.security import TokenError, TokenPayload, cleared_cookie_header, verify_token
from saturday.core.settings import settings
from saturday.db.session import get_db
from saturday.models.user import User


@dataclass(frozen=True)
class Identity:
    """Verified caller attached to a single request."""

    user_id: int
    school_id: Optional[int]
    school_slug: Optional[str]
    email: str
    username: str

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "Identity":
        return cls(
            user_id=payload.user_id,
            school_id=payload.school_id,
            school_slug=payload.school_slug,
            email=payload.email,
            username=payload.username,
        )


def _read_identity(request: Request) -> Optional[Identity]:
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None
    payload = verify_token(token)
    return Identity.from_payload(payload)


def require_auth(request: Request) -> Identity:
    """Reject the request unless it carries a valid session cookie.

    A missing cookie leaves the client untouched. A bad cookie (tampered,
    expired or malformed) is cleared on the way out, and the failure reason
    only goes to the security log.
    """
    try:
        identity = _read_identity(request)
    except TokenError as exc:
        log_auth_event("token_rejected", request=request, extra={"reason": exc.kind})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"set-cookie": cleared_cookie_header(request)},
        ) from exc
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    request.state.identity = identity
    return identity


def optional_auth(request: Request) -> Optional[Identity]:
    try:
        identity = _read_identity(request)
    except TokenError as exc:
        log_auth_event("token_ignored", request=request, extra={"reason": exc.kind})
        identity = None
    request.state.identity = identity
    return identity


def require_school_access(request: Request, identity: Identity = Depends(require_auth)) -> Identity:
    if identity.school_id is None:
        log_auth_event("school_access_denied", request=request, extra={"user_id": identity.user_id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="School access required")
    return identity


def get_current_user(
    request: Request,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, identity.user_id)
    if not user or not user.is_active:
        log_auth_event("inactive_or_missing_user", request=request, extra={"user_id": identity.user_id})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"set-cookie": cleared_cookie_header(request)},
        )
    return user
