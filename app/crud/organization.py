from typing import Optional

from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.organization import Organization
from app.schemas.organization import OrganizationCreate, OrganizationUpdate


class CRUDOrganization(CRUDBase[Organization, OrganizationCreate, OrganizationUpdate]):

    def get_by_slug(self, db: Session, slug: str, *, context: TenantContext, include_deleted: bool = False) -> Optional[Organization]:
        return self.find_one(db, Organization.slug == slug, context=context, include_deleted=include_deleted)


organization = CRUDOrganization(Organization)
