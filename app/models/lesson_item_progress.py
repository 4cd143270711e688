from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, UniqueConstraint, Uuid
from app.core.database import Base
from app.models.base import TenantEntity

class LessonItemProgress(TenantEntity, Base):
    __tablename__ = "lesson_item_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_item_id", name="uq_lesson_item_progress_user_item"),
    )

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    lesson_item_id = Column(Uuid, ForeignKey("lesson_items.id"), nullable=False, index=True)
    lesson_id = Column(Uuid, ForeignKey("lessons.id"), nullable=False)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_duration_in_seconds = Column(Float, nullable=False, default=0)
