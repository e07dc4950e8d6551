from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, get_current_user, require_school_access
from saturday.db.session import get_db
from saturday.models.user import User
from saturday.schemas.user import UserRead, UserSelfUpdate
from saturday.services.activity import log_activity
from saturday.services.schools import is_member, school_members

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/school", response_model=List[UserRead])
def list_school_users(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[UserRead]:
    members = school_members(db, school_id=identity.school_id, exclude_user_id=identity.user_id)
    return [UserRead.model_validate(user) for user in members]


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserSelfUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserRead:
    updates = payload.model_dump(exclude_unset=True)
    new_min = updates.get("group_size_min", current_user.group_size_min)
    new_max = updates.get("group_size_max", current_user.group_size_max)
    if new_min is not None and new_max is not None and new_max < new_min:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="group_size_max cannot be smaller than group_size_min",
        )
    for field, value in updates.items():
        setattr(current_user, field, value)
    db.add(current_user)
    log_activity(
        db,
        actor_user_id=current_user.id,
        activity_type="USER_PROFILE_UPDATED",
        message="Profile updated",
        payload={"fields": sorted(updates)},
    )
    db.commit()
    db.refresh(current_user)
    return UserRead.model_validate(current_user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> UserRead:
    user = db.get(User, user_id)
    if not user or not user.is_active or not is_member(db, school_id=identity.school_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)
