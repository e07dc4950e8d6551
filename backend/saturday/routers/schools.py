from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from saturday.db.session import get_db
from saturday.schemas.school import SchoolRead
from saturday.services.schools import get_school_by_slug, list_schools

router = APIRouter(prefix="/api/schools", tags=["schools"])


@router.get("", response_model=List[SchoolRead])
def get_schools(q: Optional[str] = Query(None, max_length=100), db: Session = Depends(get_db)) -> List[SchoolRead]:
    return [SchoolRead.model_validate(school) for school in list_schools(db, q)]


@router.get("/{slug}", response_model=SchoolRead)
def get_school(slug: str, db: Session = Depends(get_db)) -> SchoolRead:
    school = get_school_by_slug(db, slug)
    if not school:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="School not found")
    return SchoolRead.model_validate(school)
