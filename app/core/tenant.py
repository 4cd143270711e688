"""Request-scoped tenant context.

A ``TenantContext`` is built once per request from verified token claims and
handed explicitly to every repository call. It is never stored globally.
"""
import logging
import uuid
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from app.core.constants import UserRoleEnum

logger = logging.getLogger(__name__)


class TenantContext(BaseModel):
    """Acting user, their organization (None for system admins) and role."""
    user_id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    role: UserRoleEnum = UserRoleEnum.STUDENT

    model_config = ConfigDict(frozen=True)

    @property
    def is_system_admin(self) -> bool:
        return self.role == UserRoleEnum.SYSTEM_ADMIN

    @property
    def should_apply_tenant_filter(self) -> bool:
        return not self.is_system_admin and self.organization_id is not None

    @classmethod
    def from_claims(cls, claims: Optional[Mapping[str, Any]]) -> Optional["TenantContext"]:
        """Build a context from token claims, or return None when they are absent or malformed.

        A missing ``role`` claim means student. An unknown role, a non-UUID
        ``sub`` or a non-UUID ``org_id`` yields no context at all.
        """
        if not claims:
            return None

        try:
            user_id = uuid.UUID(str(claims["sub"]))
        except (KeyError, ValueError, TypeError):
            logger.debug("Token claims carry no usable subject")
            return None

        organization_id = None
        raw_org = claims.get("org_id")
        if raw_org:
            try:
                organization_id = uuid.UUID(str(raw_org))
            except (ValueError, TypeError):
                logger.debug("Token claims carry a malformed organization id")
                return None

        raw_role = claims.get("role")
        if raw_role is None:
            role = UserRoleEnum.STUDENT
        else:
            try:
                role = UserRoleEnum(raw_role)
            except ValueError:
                logger.debug(f"Token claims carry an unknown role: {raw_role}")
                return None

        return cls(user_id=user_id, organization_id=organization_id, role=role)
