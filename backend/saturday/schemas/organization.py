from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from saturday.schemas.base import ORMModel


class OrganizationCreate(ORMModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    member_count: int = Field(default=1, ge=1)
    group_type: Optional[str] = Field(default=None, max_length=100)
    established_year: Optional[int] = Field(default=None, ge=1600, le=2100)
    contact_email: Optional[str] = None
    social_media: Optional[Dict[str, str]] = None
    profile_image: Optional[str] = None


class OrganizationRead(OrganizationCreate):
    id: int
    school_id: int
    created_at: datetime
