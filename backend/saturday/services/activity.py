from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from saturday.models.audit import ActivityLog


def log_activity(
    db: Session,
    *,
    actor_user_id: Optional[int],
    activity_type: str,
    message: Optional[str] = None,
    payload: Optional[dict] = None,
) -> ActivityLog:
    activity = ActivityLog(
        actor_user_id=actor_user_id,
        type=activity_type,
        message=message,
        payload_json=payload,
    )
    db.add(activity)
    db.flush()
    return activity


def recent_activity(db: Session, *, activity_type: str, since: datetime, limit: int = 200) -> List[ActivityLog]:
    """Newest first, capped at ``limit`` rows."""
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.type == activity_type, ActivityLog.created_at >= since)
        .order_by(ActivityLog.created_at.desc())
        .limit(limit)
        .all()
    )


def count_matching(entries: List[ActivityLog], **payload_values: object) -> int:
    """Count entries whose payload matches any one of the given key/value pairs."""
    hits = 0
    for entry in entries:
        payload = entry.payload_json or {}
        if any(payload.get(key) == value for key, value in payload_values.items()):
            hits += 1
    return hits
