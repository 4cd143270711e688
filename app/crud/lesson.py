import uuid
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.lesson import Lesson
from app.schemas.lesson import LessonCreate, LessonUpdate


class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):

    def get_by_course(self, db: Session, course_id: uuid.UUID, *, context: TenantContext) -> List[Lesson]:
        return self.find(db, Lesson.course_id == course_id, context=context, order_by=Lesson.order)

    def next_order(self, db: Session, course_id: uuid.UUID, *, context: TenantContext) -> int:
        # Soft-deleted lessons still hold their slot in the (course_id, order) constraint.
        highest = (
            self._query(db, context=context, include_deleted=True)
            .filter(Lesson.course_id == course_id)
            .with_entities(func.max(Lesson.order))
            .scalar()
        )
        return 0 if highest is None else highest + 1


lesson = CRUDLesson(Lesson)
