import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):

    def get_by_email(self, db: Session, email: str, *, context: TenantContext, include_deleted: bool = False) -> Optional[User]:
        return self.find_one(
            db, func.lower(User.email) == normalize_email(email),
            context=context, include_deleted=include_deleted,
        )

    def get_by_email_in_organization(
        self, db: Session, email: str, organization_id: Optional[uuid.UUID], *, context: TenantContext, include_deleted: bool = False
    ) -> Optional[User]:
        org_clause = User.organization_id.is_(None) if organization_id is None else User.organization_id == organization_id
        return self.find_one(
            db, func.lower(User.email) == normalize_email(email), org_clause,
            context=context, include_deleted=include_deleted,
        )


user = CRUDUser(User)
