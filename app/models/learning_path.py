from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TenantEntity

class LearningPath(TenantEntity, Base):
    __tablename__ = "learning_paths"

    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    photo = Column(String, nullable=True)
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=True)


class LearningPathSection(TenantEntity, Base):
    __tablename__ = "learning_path_sections"

    learning_path_id = Column(Uuid, ForeignKey("learning_paths.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    order = Column(Integer, nullable=False, default=0)

    learning_path = relationship("LearningPath")


class LearningPathCourse(TenantEntity, Base):
    __tablename__ = "learning_path_courses"
    __table_args__ = (
        UniqueConstraint("section_id", "course_id", name="uq_learning_path_courses_section_course"),
    )

    # Denormalized from the section so a path's courses load in one query.
    learning_path_id = Column(Uuid, ForeignKey("learning_paths.id"), nullable=False, index=True)
    section_id = Column(Uuid, ForeignKey("learning_path_sections.id"), nullable=False, index=True)
    course_id = Column(Uuid, ForeignKey("courses.id"), nullable=False, index=True)
    order = Column(Integer, nullable=False, default=0)
    is_required = Column(Boolean, nullable=False, default=True)

    course = relationship("Course")
