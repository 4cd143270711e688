from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import TenantEntity

class Category(TenantEntity, Base):
    __tablename__ = "categories"

    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
