import uuid
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.learning_path import LearningPath, LearningPathCourse, LearningPathSection
from app.schemas.learning_path import (
    LearningPathCourseCreate,
    LearningPathCourseUpdate,
    LearningPathCreate,
    LearningPathSectionCreate,
    LearningPathSectionUpdate,
    LearningPathUpdate,
)
from app.schemas.response import PaginatedResponse


class CRUDLearningPath(CRUDBase[LearningPath, LearningPathCreate, LearningPathUpdate]):

    def search_paged(
        self, db: Session, *, context: TenantContext, search: Optional[str] = None, page: int = 1, size: int = 20
    ) -> PaginatedResponse:
        criteria = []
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            criteria.append(or_(LearningPath.name.ilike(pattern), LearningPath.description.ilike(pattern)))
        return self.get_paged(db, *criteria, context=context, page=page, size=size)


class CRUDLearningPathSection(CRUDBase[LearningPathSection, LearningPathSectionCreate, LearningPathSectionUpdate]):

    def get_by_learning_path(self, db: Session, learning_path_id: uuid.UUID, *, context: TenantContext) -> List[LearningPathSection]:
        return self.find(
            db, LearningPathSection.learning_path_id == learning_path_id,
            context=context, order_by=LearningPathSection.order,
        )

    def next_order(self, db: Session, learning_path_id: uuid.UUID, *, context: TenantContext) -> int:
        highest = (
            self._query(db, context=context)
            .filter(LearningPathSection.learning_path_id == learning_path_id)
            .with_entities(func.max(LearningPathSection.order))
            .scalar()
        )
        return 0 if highest is None else highest + 1


class CRUDLearningPathCourse(CRUDBase[LearningPathCourse, LearningPathCourseCreate, LearningPathCourseUpdate]):

    def get_by_section(self, db: Session, section_id: uuid.UUID, *, context: TenantContext) -> List[LearningPathCourse]:
        return self.find(
            db, LearningPathCourse.section_id == section_id,
            context=context, order_by=LearningPathCourse.order,
        )

    def get_by_learning_paths(
        self, db: Session, learning_path_ids: List[uuid.UUID], *, context: TenantContext
    ) -> List[LearningPathCourse]:
        if not learning_path_ids:
            return []
        return self.find(
            db, LearningPathCourse.learning_path_id.in_(learning_path_ids),
            context=context, order_by=LearningPathCourse.order,
        )

    def get_by_section_and_course(
        self, db: Session, section_id: uuid.UUID, course_id: uuid.UUID, *, context: TenantContext
    ) -> Optional[LearningPathCourse]:
        return self.find_one(
            db, LearningPathCourse.section_id == section_id, LearningPathCourse.course_id == course_id,
            context=context, include_deleted=True,
        )


learning_path = CRUDLearningPath(LearningPath)
learning_path_section = CRUDLearningPathSection(LearningPathSection)
learning_path_course = CRUDLearningPathCourse(LearningPathCourse)
