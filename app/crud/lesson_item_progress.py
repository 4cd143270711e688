import uuid
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.lesson_item_progress import LessonItemProgress
from app.schemas.progress import MarkCompleteRequest


class CRUDLessonItemProgress(CRUDBase[LessonItemProgress, MarkCompleteRequest, MarkCompleteRequest]):

    def get_by_user_and_item(
        self, db: Session, user_id: uuid.UUID, lesson_item_id: uuid.UUID, *, context: TenantContext
    ) -> Optional[LessonItemProgress]:
        return self.find_one(
            db, LessonItemProgress.user_id == user_id, LessonItemProgress.lesson_item_id == lesson_item_id,
            context=context, include_deleted=True,
        )

    def get_by_user_and_items(
        self, db: Session, user_id: uuid.UUID, lesson_item_ids: Iterable[uuid.UUID], *, context: TenantContext
    ) -> List[LessonItemProgress]:
        ids = list(lesson_item_ids)
        if not ids:
            return []
        return self.find(
            db, LessonItemProgress.user_id == user_id, LessonItemProgress.lesson_item_id.in_(ids),
            context=context,
        )

    def get_completed_for_course(self, db: Session, user_id: uuid.UUID, course_id: uuid.UUID, *, context: TenantContext) -> List[LessonItemProgress]:
        return self.find(
            db,
            LessonItemProgress.user_id == user_id,
            LessonItemProgress.course_id == course_id,
            LessonItemProgress.is_completed.is_(True),
            context=context,
        )

    def completed_duration_by_course(
        self, db: Session, user_id: uuid.UUID, course_ids: Iterable[uuid.UUID], *, context: TenantContext
    ) -> Dict[uuid.UUID, float]:
        ids = list(course_ids)
        if not ids:
            return {}
        rows = (
            self._query(db, context=context)
            .filter(
                LessonItemProgress.user_id == user_id,
                LessonItemProgress.course_id.in_(ids),
                LessonItemProgress.is_completed.is_(True),
            )
            .with_entities(LessonItemProgress.course_id, func.sum(LessonItemProgress.completed_duration_in_seconds))
            .group_by(LessonItemProgress.course_id)
            .all()
        )
        return {course_id: float(total or 0) for course_id, total in rows}


lesson_item_progress = CRUDLessonItemProgress(LessonItemProgress)
