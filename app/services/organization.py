import logging
import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.tenant import TenantContext
from app.crud.organization import organization as crud_organization
from app.models.organization import Organization as OrganizationModel
from app.schemas.organization import OrganizationCreate, OrganizationUpdate, Organization
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class OrganizationService:

    def _get_or_raise(self, db: Session, organization_id: uuid.UUID, current_user_context: TenantContext, include_deleted: bool = False) -> OrganizationModel:
        org = crud_organization.get(db, organization_id, context=current_user_context, include_deleted=include_deleted)
        if not org:
            raise NotFoundError("Organization not found.")
        return org

    def create_organization(self, db: Session, org_in: OrganizationCreate, current_user_context: TenantContext) -> Organization:
        permission_helper.require_system_admin(current_user_context, "Only system admins can create organizations.")

        if crud_organization.get_by_slug(db, org_in.slug, context=current_user_context, include_deleted=True):
            raise ConflictError(f"Organization slug '{org_in.slug}' is already taken.")

        # Members read their organization through the scoped repository, so the row owns itself.
        org_id = uuid.uuid4()
        new_org = OrganizationModel(id=org_id, organization_id=org_id, **org_in.model_dump())
        crud_organization.add(db, context=current_user_context, obj_in=new_org)
        crud_organization.save_changes(db)
        db.refresh(new_org)

        logger.info(f"Organization {new_org.id} ({new_org.slug}) created by {current_user_context.user_id}")
        return Organization.model_validate(new_org)

    def get_organization(self, db: Session, organization_id: uuid.UUID, current_user_context: TenantContext) -> Organization:
        return Organization.model_validate(self._get_or_raise(db, organization_id, current_user_context))

    def get_organizations(self, db: Session, current_user_context: TenantContext) -> List[Organization]:
        permission_helper.require_system_admin(current_user_context)
        orgs = crud_organization.get_all(db, context=current_user_context, order_by=OrganizationModel.name)
        return [Organization.model_validate(o) for o in orgs]

    def update_organization(self, db: Session, organization_id: uuid.UUID, org_in: OrganizationUpdate, current_user_context: TenantContext) -> Organization:
        permission_helper.require_system_admin(current_user_context)
        org = self._get_or_raise(db, organization_id, current_user_context)
        crud_organization.update(db, context=current_user_context, db_obj=org, obj_in=org_in)
        crud_organization.save_changes(db)
        db.refresh(org)
        return Organization.model_validate(org)

    def delete_organization(self, db: Session, organization_id: uuid.UUID, current_user_context: TenantContext) -> Organization:
        permission_helper.require_system_admin(current_user_context)
        org = self._get_or_raise(db, organization_id, current_user_context)
        crud_organization.remove(db, context=current_user_context, db_obj=org)
        crud_organization.save_changes(db)
        db.refresh(org)
        logger.info(f"Organization {org.id} soft-deleted by {current_user_context.user_id}")
        return Organization.model_validate(org)

    def restore_organization(self, db: Session, organization_id: uuid.UUID, current_user_context: TenantContext) -> Organization:
        permission_helper.require_system_admin(current_user_context)
        org = self._get_or_raise(db, organization_id, current_user_context, include_deleted=True)
        crud_organization.restore(db, context=current_user_context, db_obj=org)
        crud_organization.save_changes(db)
        db.refresh(org)
        return Organization.model_validate(org)


organization_service = OrganizationService()
