import logging
import math
import uuid
from typing import Any, Dict, Generic, Iterable, List, Optional, Set, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.filters import require_context, scope_criteria
from app.models.base import TenantEntity, utcnow
from app.schemas.response import PaginatedResponse

ModelType = TypeVar("ModelType", bound=TenantEntity)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

OrderBy = Union[str, ColumnElement, Any]

logger = logging.getLogger(__name__)

# Never written through update(); is_deleted only moves via remove()/restore().
ALWAYS_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at", "is_deleted"})


def translate_integrity_error(exc: IntegrityError) -> Exception:
    message = str(getattr(exc, "orig", exc)).lower()
    if "unique" in message or "duplicate" in message:
        return ConflictError("Resource already exists")
    return ValidationFailedError("Invalid reference or missing required field")


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Tenant-scoped, soft-deleting repository over one model.

    Every read and write composes the caller's criteria with the soft-delete
    and organization clauses from ``app.crud.filters``. Mutations are only
    staged on the session; ``save_changes`` commits the unit of work.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    # ---- queries ----

    def _query(self, db: Session, *, context: TenantContext, include_deleted: bool = False) -> Query:
        return db.query(self.model).filter(
            *scope_criteria(self.model, context, include_deleted=include_deleted)
        )

    def _apply_ordering(self, query: Query, order_by: Optional[OrderBy], descending: bool) -> Query:
        if order_by is None:
            return query
        column = getattr(self.model, order_by) if isinstance(order_by, str) else order_by
        return query.order_by(column.desc() if descending else column.asc())

    def get(self, db: Session, id: Any, *, context: TenantContext, include_deleted: bool = False) -> Optional[ModelType]:
        if id is None:
            return None
        return (
            self._query(db, context=context, include_deleted=include_deleted)
            .filter(self.model.id == id)
            .first()
        )

    def get_all(
        self,
        db: Session,
        *,
        context: TenantContext,
        order_by: Optional[OrderBy] = None,
        descending: bool = False,
        include_deleted: bool = False,
    ) -> List[ModelType]:
        query = self._query(db, context=context, include_deleted=include_deleted)
        return self._apply_ordering(query, order_by, descending).all()

    def find(
        self,
        db: Session,
        *criteria: ColumnElement,
        context: TenantContext,
        order_by: Optional[OrderBy] = None,
        descending: bool = False,
        include_deleted: bool = False,
    ) -> List[ModelType]:
        query = self._query(db, context=context, include_deleted=include_deleted).filter(*criteria)
        return self._apply_ordering(query, order_by, descending).all()

    def find_one(
        self,
        db: Session,
        *criteria: ColumnElement,
        context: TenantContext,
        include_deleted: bool = False,
    ) -> Optional[ModelType]:
        return self._query(db, context=context, include_deleted=include_deleted).filter(*criteria).first()

    def exists(
        self,
        db: Session,
        *criteria: ColumnElement,
        context: TenantContext,
        include_deleted: bool = False,
    ) -> bool:
        return self.find_one(db, *criteria, context=context, include_deleted=include_deleted) is not None

    def count(self, db: Session, *criteria: ColumnElement, context: TenantContext, include_deleted: bool = False) -> int:
        return self._query(db, context=context, include_deleted=include_deleted).filter(*criteria).count()

    def get_paged(
        self,
        db: Session,
        *criteria: ColumnElement,
        context: TenantContext,
        page: int = 1,
        size: int = 20,
        order_by: Optional[OrderBy] = None,
        descending: bool = True,
        include_deleted: bool = False,
    ) -> PaginatedResponse:
        if page < 1:
            raise ValidationFailedError("Page must be greater than zero.")
        if size < 1:
            raise ValidationFailedError("Page size must be greater than zero.")

        query = self._query(db, context=context, include_deleted=include_deleted).filter(*criteria)
        total = query.count()
        query = self._apply_ordering(query, order_by if order_by is not None else self.model.created_at, descending)
        items = query.offset((page - 1) * size).limit(size).all()
        pages = math.ceil(total / size) if total else 0
        return PaginatedResponse(
            items=items,
            total=total,
            page=page,
            size=size,
            pages=pages,
            has_next=page < pages,
            has_previous=page > 1,
        )

    # ---- writes ----

    def _column_names(self) -> Set[str]:
        return {column.key for column in inspect(self.model).column_attrs}

    def _as_dict(self, obj_in: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(obj_in, dict):
            return dict(obj_in)
        return obj_in.model_dump(exclude_unset=True)

    def _modified_attributes(self, db_obj: ModelType) -> List[str]:
        columns = self._column_names()
        return [
            attr.key for attr in inspect(db_obj).attrs
            if attr.key in columns and attr.history.has_changes()
        ]

    def _protected_fields(self, context: TenantContext) -> Set[str]:
        protected = set(ALWAYS_PROTECTED_FIELDS)
        if not context.is_system_admin:
            protected.add("organization_id")
        return protected

    def _get_in_scope(self, db: Session, id: Any, *, context: TenantContext) -> ModelType:
        existing = self.get(db, id, context=context, include_deleted=True)
        if existing is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return existing

    def add(self, db: Session, *, context: TenantContext, obj_in: Union[ModelType, CreateSchemaType, Dict[str, Any]]) -> ModelType:
        context = require_context(context)
        if isinstance(obj_in, self.model):
            db_obj = obj_in
        else:
            db_obj = self.model(**self._as_dict(obj_in))

        if not context.is_system_admin:
            if db_obj.organization_id is None:
                db_obj.organization_id = context.organization_id
            elif db_obj.organization_id != context.organization_id:
                raise ValidationFailedError("Cannot create records for another organization.")

        now = utcnow()
        if db_obj.id is None:
            db_obj.id = uuid.uuid4()
        db_obj.created_at = now
        db_obj.updated_at = now
        db_obj.is_deleted = False
        db.add(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        context: TenantContext,
        db_obj: ModelType,
        obj_in: Optional[Union[UpdateSchemaType, Dict[str, Any]]] = None,
        fields: Optional[Iterable[str]] = None,
    ) -> ModelType:
        """Persist changes to an in-scope row.

        Changes come from ``obj_in`` when given, otherwise from ``db_obj``
        itself (either the session's own instance or a detached one carrying
        the id). With ``fields`` only those attributes are written and other
        pending changes on the session's instance are discarded.
        """
        context = require_context(context)
        existing = self._get_in_scope(db, db_obj.id, context=context)
        columns = self._column_names()
        protected = self._protected_fields(context)
        allowed = set(fields) if fields is not None else None

        if obj_in is not None:
            changes = self._as_dict(obj_in)
        elif existing is db_obj:
            changes = {}
        else:
            changes = {name: getattr(db_obj, name) for name in columns}

        if existing is db_obj:
            stale = [
                name for name in self._modified_attributes(existing)
                if name in protected or (allowed is not None and name not in allowed)
            ]
            if stale:
                db.expire(existing, stale)

        for name, value in changes.items():
            if name not in columns or name in protected:
                continue
            if allowed is not None and name not in allowed:
                continue
            setattr(existing, name, value)

        existing.updated_at = utcnow()
        db.add(existing)
        return existing

    def remove(self, db: Session, *, context: TenantContext, db_obj: ModelType) -> ModelType:
        existing = self._get_in_scope(db, db_obj.id, context=require_context(context))
        existing.is_deleted = True
        existing.updated_at = utcnow()
        db.add(existing)
        return existing

    def restore(self, db: Session, *, context: TenantContext, db_obj: ModelType) -> ModelType:
        existing = self._get_in_scope(db, db_obj.id, context=require_context(context))
        existing.is_deleted = False
        existing.updated_at = utcnow()
        db.add(existing)
        return existing

    def save_changes(self, db: Session) -> int:
        """Commit the unit of work; returns how many instances it inserted, changed or deleted."""
        affected = (
            len(db.new)
            + len(db.deleted)
            + sum(1 for obj in db.dirty if db.is_modified(obj))
        )
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"Integrity error while saving {self.model.__name__}: {exc.orig}")
            raise translate_integrity_error(exc) from exc
        return affected
