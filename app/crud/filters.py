"""Scope predicates shared by every repository.

The soft-delete and tenant clauses are kept separate so each can be reasoned
about (and tested) on its own; ``scope_criteria`` is the only place they meet.
"""
from typing import List, Optional, Type

from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import UnauthorizedError
from app.core.tenant import TenantContext
from app.models.base import TenantEntity


def require_context(context: Optional[TenantContext]) -> TenantContext:
    if context is None:
        raise UnauthorizedError("Tenant context is required")
    return context


def soft_delete_criterion(model: Type[TenantEntity], include_deleted: bool = False) -> Optional[ColumnElement]:
    if include_deleted:
        return None
    return model.is_deleted.is_(False)


def tenant_criterion(model: Type[TenantEntity], context: TenantContext) -> Optional[ColumnElement]:
    # A non-admin without an organization only sees organization-less rows.
    if context.is_system_admin:
        return None
    if context.organization_id is None:
        return model.organization_id.is_(None)
    return model.organization_id == context.organization_id


def scope_criteria(model: Type[TenantEntity], context: Optional[TenantContext], include_deleted: bool = False) -> List[ColumnElement]:
    context = require_context(context)
    criteria = (
        soft_delete_criterion(model, include_deleted),
        tenant_criterion(model, context),
    )
    return [criterion for criterion in criteria if criterion is not None]
