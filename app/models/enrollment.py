from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TenantEntity, utcnow

class Enrollment(TenantEntity, Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_favourite = Column(Boolean, nullable=False, default=False)
    # Back-reference only, the enrollment does not own the item.
    last_lesson_item_id = Column(Uuid, ForeignKey("lesson_items.id"), nullable=True)
    completed_duration_in_seconds = Column(Float, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    course = relationship("Course")
