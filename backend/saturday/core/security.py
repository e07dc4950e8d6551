from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

from fastapi import Request, Response
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from saturday.core.settings import settings

if TYPE_CHECKING:
    from saturday.models.school import School
    from saturday.models.user import User


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# ── Session tokens ──────────────────────────────────────────────────────


class TokenError(Exception):
    """Base class for every reason a session token is refused."""

    kind = "invalid"


class InvalidSignature(TokenError):
    kind = "invalid_signature"


class TokenExpired(TokenError):
    kind = "expired"


class MalformedToken(TokenError):
    kind = "malformed"


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    school_id: Optional[int]
    school_slug: Optional[str]
    email: str
    username: str
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) >= self.expires_at


def _expiry_delta(expires_delta: Optional[timedelta]) -> timedelta:
    if expires_delta is not None:
        return expires_delta
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.setdefault("iat", now)
    to_encode.update({"exp": now + _expiry_delta(expires_delta)})
    return jwt.encode(to_encode, settings.session_secret, algorithm=settings.algorithm)


def issue_token(user: "User", school: Optional["School"], expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token for a persisted user and (optionally) their school."""
    if user.id is None:
        raise ValueError("Cannot issue a token for an unsaved user")
    if school is not None and school.id is None:
        raise ValueError("Cannot issue a token for an unsaved school")
    claims: Dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username,
        "school_id": school.id if school is not None else None,
        "school_slug": school.slug if school is not None else None,
    }
    return create_access_token(claims, expires_delta=expires_delta)


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.session_secret, algorithms=[settings.algorithm])


def verify_token(token: str) -> TokenPayload:
    """Check signature, then expiry, then claim shape.

    Raises InvalidSignature, TokenExpired or MalformedToken. Callers must not
    tell them apart in anything sent back to the client.
    """
    if not token or token.count(".") != 2:
        raise MalformedToken("token does not have three segments")
    try:
        jwt.get_unverified_header(token)
    except JWTError as exc:
        raise MalformedToken(str(exc)) from exc

    try:
        claims = decode_token(token)
    except ExpiredSignatureError as exc:
        raise TokenExpired(str(exc)) from exc
    except JWTClaimsError as exc:
        raise MalformedToken(str(exc)) from exc
    except JWTError as exc:
        raise InvalidSignature(str(exc)) from exc

    try:
        school_id = claims.get("school_id")
        return TokenPayload(
            user_id=int(claims["sub"]),
            school_id=int(school_id) if school_id is not None else None,
            school_slug=claims.get("school_slug"),
            email=str(claims["email"]),
            username=str(claims["username"]),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedToken(f"unusable claims: {exc}") from exc


# ── Cookie transport ────────────────────────────────────────────────────


def _cookie_secure(request: Optional[Request]) -> bool:
    if settings.cookie_secure is not None:
        return settings.cookie_secure
    return request is not None and request.url.scheme == "https"


def set_auth_cookie(response: Response, token: str, request: Optional[Request] = None) -> None:
    # Max-Age tracks the token lifetime so both expire together.
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(request),
    )


def clear_auth_cookie(response: Response, request: Optional[Request] = None) -> None:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(request),
    )


def cleared_cookie_header(request: Optional[Request] = None) -> str:
    """Set-Cookie value that removes the auth cookie, for error responses."""
    scratch = Response()
    clear_auth_cookie(scratch, request)
    return scratch.headers["set-cookie"]
