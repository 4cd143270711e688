import uuid
from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TenantEntity:
    """Columns every persisted record carries.

    The generic repository relies only on these, so any model that mixes this
    in gets tenant scoping and soft delete without further work.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)

    @declared_attr
    def organization_id(cls):
        return Column(Uuid, ForeignKey("organizations.id"), nullable=True, index=True)
