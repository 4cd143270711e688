import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.organization import Organization, OrganizationCreate, OrganizationUpdate
from app.schemas.response import APIResponse
from app.services.organization import organization_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Organization], status_code=status.HTTP_201_CREATED)
def create_organization(
    *,
    db: Session = Depends(deps.get_db),
    org_in: OrganizationCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    org = organization_service.create_organization(db, org_in=org_in, current_user_context=context)
    return APIResponse(message="Organization created successfully", data=org)


@router.get("/", response_model=APIResponse[List[Organization]])
def get_organizations(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    orgs = organization_service.get_organizations(db, current_user_context=context)
    return APIResponse(message="Organizations retrieved successfully", data=orgs)


@router.get("/{organization_id}", response_model=APIResponse[Organization])
def read_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    org = organization_service.get_organization(db, organization_id=organization_id, current_user_context=context)
    return APIResponse(message="Organization retrieved successfully", data=org)


@router.put("/{organization_id}", response_model=APIResponse[Organization])
def update_organization(
    *,
    db: Session = Depends(deps.get_db),
    organization_id: uuid.UUID,
    org_in: OrganizationUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    org = organization_service.update_organization(db, organization_id=organization_id, org_in=org_in, current_user_context=context)
    return APIResponse(message="Organization updated successfully", data=org)


@router.delete("/{organization_id}", response_model=APIResponse[Organization])
def delete_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    org = organization_service.delete_organization(db, organization_id=organization_id, current_user_context=context)
    return APIResponse(message="Organization deleted successfully", data=org)


@router.post("/{organization_id}/restore", response_model=APIResponse[Organization])
def restore_organization(
    organization_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    org = organization_service.restore_organization(db, organization_id=organization_id, current_user_context=context)
    return APIResponse(message="Organization restored successfully", data=org)
