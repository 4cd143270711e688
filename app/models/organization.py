from sqlalchemy import Boolean, Column, String
from app.core.database import Base
from app.models.base import TenantEntity

class Organization(TenantEntity, Base):
    __tablename__ = "organizations"

    name = Column(String, index=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
