from sqlalchemy import Boolean, Column, Integer, ForeignKey, JSON, UniqueConstraint, Uuid
from app.core.database import Base
from app.models.base import TenantEntity

class QuizSubmission(TenantEntity, Base):
    __tablename__ = "quiz_submissions"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_item_id", name="uq_quiz_submissions_user_item"),
    )

    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    lesson_item_id = Column(Uuid, ForeignKey("lesson_items.id"), nullable=False, index=True)
    # [{"questionId": ..., "selectedOptionId": ...}]
    answers = Column(JSON, nullable=False, default=list)
    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
