from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TenantEntity, utcnow

class LearningPathProgress(TenantEntity, Base):
    """A user's enrollment in a learning path and where they are in it."""
    __tablename__ = "learning_path_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "learning_path_id", name="uq_learning_path_progress_user_path"),
    )

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    learning_path_id = Column(Uuid, ForeignKey("learning_paths.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    current_section_id = Column(Uuid, ForeignKey("learning_path_sections.id"), nullable=True)
    current_course_id = Column(Uuid, ForeignKey("courses.id"), nullable=True)
    completed_duration_in_seconds = Column(Float, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    learning_path = relationship("LearningPath")
