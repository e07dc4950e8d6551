from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from saturday.core.deps import Identity, require_school_access
from saturday.db.session import get_db
from saturday.models.organization import Organization
from saturday.schemas.organization import OrganizationCreate, OrganizationRead
from saturday.services.activity import log_activity

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.get("/school", response_model=List[OrganizationRead])
def list_school_organizations(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> List[OrganizationRead]:
    organizations = (
        db.query(Organization)
        .filter(Organization.school_id == identity.school_id)
        .order_by(Organization.name.asc())
        .all()
    )
    return [OrganizationRead.model_validate(org) for org in organizations]


@router.get("/{organization_id}", response_model=OrganizationRead)
def get_organization(
    organization_id: int,
    db: Session = Depends(get_db),
) -> OrganizationRead:
    organization = db.get(Organization, organization_id)
    if not organization:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")
    return OrganizationRead.model_validate(organization)


@router.post("", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_school_access),
) -> OrganizationRead:
    organization = Organization(school_id=identity.school_id, **payload.model_dump())
    db.add(organization)
    db.flush()
    log_activity(
        db,
        actor_user_id=identity.user_id,
        activity_type="ORGANIZATION_CREATED",
        message=f"Organization created: {organization.name}",
        payload={"organization_id": organization.id, "school_id": identity.school_id},
    )
    db.commit()
    db.refresh(organization)
    return OrganizationRead.model_validate(organization)
