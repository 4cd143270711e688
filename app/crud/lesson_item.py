import uuid
from typing import Dict, Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.lesson_item import LessonItem
from app.schemas.lesson_item import LessonItemCreate, LessonItemUpdate


class CRUDLessonItem(CRUDBase[LessonItem, LessonItemCreate, LessonItemUpdate]):

    def get_by_lesson(self, db: Session, lesson_id: uuid.UUID, *, context: TenantContext) -> List[LessonItem]:
        return self.find(db, LessonItem.lesson_id == lesson_id, context=context, order_by=LessonItem.order)

    def get_by_course(self, db: Session, course_id: uuid.UUID, *, context: TenantContext) -> List[LessonItem]:
        return self.find(db, LessonItem.course_id == course_id, context=context, order_by=LessonItem.order)

    def duration_by_course(self, db: Session, course_ids: Iterable[uuid.UUID], *, context: TenantContext) -> Dict[uuid.UUID, float]:
        ids = list(course_ids)
        if not ids:
            return {}
        rows = (
            self._query(db, context=context)
            .filter(LessonItem.course_id.in_(ids))
            .with_entities(LessonItem.course_id, func.sum(LessonItem.duration_in_seconds))
            .group_by(LessonItem.course_id)
            .all()
        )
        return {course_id: float(total or 0) for course_id, total in rows}


lesson_item = CRUDLessonItem(LessonItem)
