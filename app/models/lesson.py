from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TenantEntity

class Lesson(TenantEntity, Base):
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("course_id", "order", name="uq_lessons_course_order"),
    )

    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)

    course = relationship("Course")
    items = relationship(
        "LessonItem",
        primaryjoin="and_(Lesson.id == LessonItem.lesson_id, LessonItem.is_deleted == False)",
        order_by="LessonItem.order",
        viewonly=True,
    )
