from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TenantEntity

class Course(TenantEntity, Base):
    __tablename__ = "courses"

    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    photo = Column(String, nullable=True)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=True)

    category = relationship("Category")
    lessons = relationship(
        "Lesson",
        primaryjoin="and_(Course.id == Lesson.course_id, Lesson.is_deleted == False)",
        order_by="Lesson.order",
        viewonly=True,
    )
