from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from saturday.db.base import utcnow
from saturday.models.conversation import Conversation, ConversationParticipant, Message
from saturday.services.schools import is_member


def list_conversations(db: Session, *, user_id: int, school_id: int) -> List[Conversation]:
    return (
        db.query(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .filter(ConversationParticipant.user_id == user_id, Conversation.school_id == school_id)
        .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
        .all()
    )


def get_conversation_for_user(
    db: Session, *, conversation_id: int, user_id: int, school_id: int
) -> Optional[Conversation]:
    conversation = db.get(Conversation, conversation_id)
    if not conversation or conversation.school_id != school_id:
        return None
    if user_id not in conversation.participant_ids:
        return None
    return conversation


def validate_participants(db: Session, *, school_id: int, user_ids: Iterable[int]) -> List[int]:
    """Return the sorted distinct ids, raising LookupError for anyone outside the school."""
    ids = sorted(set(user_ids))
    outsiders = [user_id for user_id in ids if not is_member(db, school_id=school_id, user_id=user_id)]
    if outsiders:
        raise LookupError(f"Users not found: {outsiders}")
    return ids


def create_conversation(
    db: Session, *, school_id: int, participant_ids: Iterable[int], title: Optional[str] = None
) -> Conversation:
    conversation = Conversation(school_id=school_id, title=title)
    for user_id in sorted(set(participant_ids)):
        conversation.participants.append(ConversationParticipant(user_id=user_id))
    db.add(conversation)
    db.flush()
    return conversation


def find_direct_conversation(db: Session, *, school_id: int, user_a: int, user_b: int) -> Optional[Conversation]:
    wanted = sorted({user_a, user_b})
    candidates = (
        db.query(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .filter(Conversation.school_id == school_id, ConversationParticipant.user_id == user_a)
        .all()
    )
    for conversation in candidates:
        if conversation.participant_ids == wanted:
            return conversation
    return None


def get_or_create_direct_conversation(db: Session, *, school_id: int, user_a: int, user_b: int) -> Conversation:
    conversation = find_direct_conversation(db, school_id=school_id, user_a=user_a, user_b=user_b)
    if conversation:
        return conversation
    return create_conversation(db, school_id=school_id, participant_ids=[user_a, user_b])


def list_messages(db: Session, *, conversation_id: int, after: Optional[datetime] = None) -> List[Message]:
    query = db.query(Message).filter(Message.conversation_id == conversation_id)
    if after is not None:
        query = query.filter(Message.created_at > after)
    return query.order_by(Message.created_at.asc(), Message.id.asc()).all()


def post_message(db: Session, *, conversation: Conversation, sender_id: int, content: str) -> Message:
    message = Message(conversation_id=conversation.id, sender_id=sender_id, content=content)
    conversation.updated_at = utcnow()
    db.add(message)
    db.add(conversation)
    db.flush()
    return message
