from __future__ import annotations

from datetime import datetime

from saturday.schemas.base import ORMModel


class SchoolRead(ORMModel):
    id: int
    slug: str
    name: str
    created_at: datetime
