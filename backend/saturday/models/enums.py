from __future__ import annotations

import enum


class AvailabilityState(str, enum.Enum):
    AVAILABLE = "available"
    PLANNED = "planned"


class MembershipRole(str, enum.Enum):
    MEMBER = "member"
    ADMIN = "admin"
