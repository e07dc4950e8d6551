from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from saturday.schemas.school import SchoolRead
from saturday.schemas.user import UserRead


class LoginRequest(BaseModel):
    # Accepts either the account email or the username.
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    user: Optional[UserRead] = None
    school: Optional[SchoolRead] = None
