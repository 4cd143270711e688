from app.core.constants import ADMIN_ROLES, AUTHOR_ROLES, UserRoleEnum
from app.core.exceptions import AccessDeniedError
from app.core.tenant import TenantContext


class PermissionHelper:
    @staticmethod
    def is_system_admin(context: TenantContext) -> bool:
        return context.is_system_admin

    @staticmethod
    def is_org_admin(context: TenantContext) -> bool:
        return context.role == UserRoleEnum.ORG_ADMIN

    @staticmethod
    def is_instructor(context: TenantContext) -> bool:
        return context.role == UserRoleEnum.INSTRUCTOR

    @staticmethod
    def is_student(context: TenantContext) -> bool:
        return context.role == UserRoleEnum.STUDENT

    @staticmethod
    def is_admin(context: TenantContext) -> bool:
        return context.role in ADMIN_ROLES

    @staticmethod
    def can_author_content(context: TenantContext) -> bool:
        return context.role in AUTHOR_ROLES

    @staticmethod
    def require_system_admin(context: TenantContext, message: str = "Only system admins can perform this action."):
        if not PermissionHelper.is_system_admin(context):
            raise AccessDeniedError(message)

    @staticmethod
    def require_admin(context: TenantContext, message: str = "Only administrators can perform this action."):
        if not PermissionHelper.is_admin(context):
            raise AccessDeniedError(message)

    @staticmethod
    def require_content_author(context: TenantContext, message: str = "Students cannot manage course content."):
        if not PermissionHelper.can_author_content(context):
            raise AccessDeniedError(message)
