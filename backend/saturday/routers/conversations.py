from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, require_school_access
from saturday.db.session import get_db
from saturday.models.conversation import Conversation
from saturday.schemas.message import (
    ConversationCreate,
    ConversationRead,
    DirectMessageCreate,
    MessageCreate,
    MessageRead,
)
from saturday.services.messaging import (
    create_conversation,
    get_conversation_for_user,
    get_or_create_direct_conversation,
    list_conversations,
    list_messages,
    post_message,
    validate_participants,
)

router = APIRouter(prefix="/api/conversations", tags=["messages"])
messages_router = APIRouter(prefix="/api/messages", tags=["messages"])


def _get_conversation_or_404(db: Session, conversation_id: int, identity: Identity) -> Conversation:
    conversation = get_conversation_for_user(
        db,
        conversation_id=conversation_id,
        user_id=identity.user_id,
        school_id=identity.school_id,
    )
    if not conversation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    return conversation


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


@router.get("", response_model=List[ConversationRead])
def get_conversations(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[ConversationRead]:
    conversations = list_conversations(db, user_id=identity.user_id, school_id=identity.school_id)
    return [ConversationRead.model_validate(conversation) for conversation in conversations]


@router.post("", response_model=ConversationRead, status_code=status.HTTP_201_CREATED)
def start_conversation(
    payload: ConversationCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> ConversationRead:
    try:
        others = validate_participants(db, school_id=identity.school_id, user_ids=payload.participant_ids)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    participant_ids = set(others) | {identity.user_id}
    if len(participant_ids) < 2:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A conversation needs another participant")
    conversation = create_conversation(
        db,
        school_id=identity.school_id,
        participant_ids=participant_ids,
        title=payload.title,
    )
    db.commit()
    db.refresh(conversation)
    return ConversationRead.model_validate(conversation)


@router.get("/{conversation_id}/messages", response_model=List[MessageRead])
def get_messages(
    conversation_id: int,
    after: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[MessageRead]:
    conversation = _get_conversation_or_404(db, conversation_id, identity)
    messages = list_messages(db, conversation_id=conversation.id, after=_as_utc(after))
    return [MessageRead.model_validate(message) for message in messages]


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    conversation_id: int,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> MessageRead:
    conversation = _get_conversation_or_404(db, conversation_id, identity)
    message = post_message(db, conversation=conversation, sender_id=identity.user_id, content=payload.content)
    db.commit()
    db.refresh(message)
    return MessageRead.model_validate(message)


@messages_router.post("/send", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def send_direct_message(
    payload: DirectMessageCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> MessageRead:
    if payload.recipient_id == identity.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot message yourself")
    try:
        validate_participants(db, school_id=identity.school_id, user_ids=[payload.recipient_id])
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found") from exc
    conversation = get_or_create_direct_conversation(
        db,
        school_id=identity.school_id,
        user_a=identity.user_id,
        user_b=payload.recipient_id,
    )
    message = post_message(db, conversation=conversation, sender_id=identity.user_id, content=payload.content)
    db.commit()
    db.refresh(message)
    return MessageRead.model_validate(message)
