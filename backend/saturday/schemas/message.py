from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from saturday.schemas.base import ORMModel


def _strip_content(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Message cannot be empty")
    return value


class ConversationCreate(BaseModel):
    participant_ids: List[int] = Field(..., min_length=1)
    title: Optional[str] = Field(default=None, max_length=255)


class ConversationRead(ORMModel):
    id: int
    school_id: int
    title: Optional[str] = None
    participant_ids: List[int]
    created_at: datetime
    updated_at: datetime


class MessageCreate(BaseModel):
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_content(value)


class DirectMessageCreate(MessageCreate):
    recipient_id: int


class MessageRead(ORMModel):
    id: int
    conversation_id: int
    sender_id: int
    content: str
    created_at: datetime
