import logging
import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.constants import UserRoleEnum
from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.user import normalize_email, user as crud_user
from app.models.user import User as UserModel
from app.schemas.user import UserCreate, UserUpdate, User
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class UserService:

    def create_user(self, db: Session, user_in: UserCreate, current_user_context: TenantContext) -> User:
        permission_helper.require_admin(current_user_context, "Only administrators can create users.")

        if user_in.role == UserRoleEnum.SYSTEM_ADMIN and not permission_helper.is_system_admin(current_user_context):
            raise AccessDeniedError("Only system admins can create system admins.")

        if permission_helper.is_system_admin(current_user_context):
            organization_id = user_in.organization_id
        elif user_in.organization_id and user_in.organization_id != current_user_context.organization_id:
            raise ValidationFailedError("Users can only be created in your own organization.")
        else:
            organization_id = current_user_context.organization_id

        # Only the target organization is consulted, so other tenants' addresses stay invisible.
        if crud_user.get_by_email_in_organization(
            db, user_in.email, organization_id, context=current_user_context, include_deleted=True
        ):
            raise ConflictError("A user with this email already exists.")

        user_data = user_in.model_dump(exclude={"organization_id"})
        user_data["email"] = normalize_email(user_in.email)
        user_data["organization_id"] = organization_id

        new_user = crud_user.add(db, context=current_user_context, obj_in=user_data)
        crud_user.save_changes(db)
        db.refresh(new_user)

        logger.info(f"User {new_user.id} created with role {new_user.role.value} by {current_user_context.user_id}")
        return User.model_validate(new_user)

    def get_me(self, db: Session, current_user_context: TenantContext) -> User:
        user = crud_user.get(db, current_user_context.user_id, context=current_user_context)
        if not user:
            raise NotFoundError("User not found.")
        return User.model_validate(user)

    def get_user(self, db: Session, user_id: uuid.UUID, current_user_context: TenantContext) -> User:
        user = crud_user.get(db, user_id, context=current_user_context)
        if not user:
            raise NotFoundError("User not found.")
        return User.model_validate(user)

    def get_user_by_email(self, db: Session, email: str, current_user_context: TenantContext) -> User:
        permission_helper.require_admin(current_user_context)
        user = crud_user.get_by_email(db, email, context=current_user_context)
        if not user:
            raise NotFoundError("User not found.")
        return User.model_validate(user)

    def get_users(self, db: Session, current_user_context: TenantContext) -> List[User]:
        permission_helper.require_admin(current_user_context)
        users = crud_user.get_all(db, context=current_user_context, order_by=UserModel.last_name)
        return [User.model_validate(u) for u in users]

    def update_user(self, db: Session, user_id: uuid.UUID, user_in: UserUpdate, current_user_context: TenantContext) -> User:
        permission_helper.require_admin(current_user_context)
        if user_in.role == UserRoleEnum.SYSTEM_ADMIN and not permission_helper.is_system_admin(current_user_context):
            raise AccessDeniedError("Only system admins can grant the system admin role.")

        user = crud_user.get(db, user_id, context=current_user_context)
        if not user:
            raise NotFoundError("User not found.")
        crud_user.update(db, context=current_user_context, db_obj=user, obj_in=user_in)
        crud_user.save_changes(db)
        db.refresh(user)
        return User.model_validate(user)

    def delete_user(self, db: Session, user_id: uuid.UUID, current_user_context: TenantContext) -> User:
        permission_helper.require_admin(current_user_context)
        user = crud_user.get(db, user_id, context=current_user_context)
        if not user:
            raise NotFoundError("User not found.")
        crud_user.remove(db, context=current_user_context, db_obj=user)
        crud_user.save_changes(db)
        logger.info(f"User {user.id} soft-deleted by {current_user_context.user_id}")
        return User.model_validate(user)


user_service = UserService()
