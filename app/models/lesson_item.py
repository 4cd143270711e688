from sqlalchemy import Column, Integer, String, ForeignKey, Enum, JSON, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import LessonItemTypeEnum
from app.models.base import TenantEntity

class LessonItem(TenantEntity, Base):
    __tablename__ = "lesson_items"

    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(Enum(LessonItemTypeEnum), nullable=False, default=LessonItemTypeEnum.TEXT)
    # Shape depends on type: video {"url"}, text {"html"}, question {"questions": [...]}
    content = Column(JSON, nullable=False, default=dict)
    duration_in_seconds = Column(Integer, nullable=False, default=0)
    order = Column(Integer, nullable=False, default=0)
    lesson_id = Column(Uuid, ForeignKey("lessons.id"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)

    lesson = relationship("Lesson")
