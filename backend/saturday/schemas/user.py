from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from saturday.schemas.base import ORMModel

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.\- ]{2,64}$")


def _validate_password_strength(password: str) -> str:
    """Enforce password complexity: min 8 chars, at least one letter and one digit."""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not re.search(r"[A-Za-z]", password):
        raise ValueError("Password must contain at least one letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain at least one digit")
    return password


def _normalize_email(value: str) -> str:
    value = value.strip()
    local, _, domain = value.partition("@")
    if not local or not domain:
        raise ValueError("Invalid email address")
    if "." not in domain and not domain.endswith(".local"):
        raise ValueError("Invalid email domain")
    return value.lower()


class ProfileFields(ORMModel):
    display_name: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=2000)
    profile_image: Optional[str] = None
    gallery_images: Optional[List[str]] = None
    group_size_min: Optional[int] = Field(default=None, ge=1)
    group_size_max: Optional[int] = Field(default=None, ge=1)
    preferences: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_group_size(self) -> "ProfileFields":
        if (
            self.group_size_min is not None
            and self.group_size_max is not None
            and self.group_size_max < self.group_size_min
        ):
            raise ValueError("group_size_max cannot be smaller than group_size_min")
        return self


class UserCreate(ProfileFields):
    username: str
    email: str
    password: str
    school_slug: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not _USERNAME_PATTERN.match(value):
            raise ValueError("Username must be 2-64 letters, digits, spaces, dots, dashes or underscores")
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        return _validate_password_strength(value)


class UserSelfUpdate(ProfileFields):
    pass


class UserRead(ORMModel):
    id: int
    username: str
    email: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    gallery_images: Optional[List[str]] = None
    group_size_min: Optional[int] = None
    group_size_max: Optional[int] = None
    preferences: Optional[List[str]] = None
    is_active: bool
    created_at: datetime
