import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.tenant import TenantContext
from app.crud.course import course as crud_course
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_item import lesson_item as crud_lesson_item
from app.models.lesson import Lesson as LessonModel
from app.schemas.lesson import LessonCreate, LessonUpdate, Lesson
from app.schemas.lesson_item import LessonItem, LessonItemWithProgress
from app.services.lesson_item import lesson_item_service
from app.services.lesson_item_progress import lesson_item_progress_service
from app.utils.permission import PermissionHelper as permission_helper


class LessonService:

    def _get_or_raise(self, db: Session, lesson_id: uuid.UUID, current_user_context: TenantContext) -> LessonModel:
        lesson = crud_lesson.get(db, lesson_id, context=current_user_context)
        if not lesson:
            raise NotFoundError("Lesson not found.")
        return lesson

    def create_lesson(self, db: Session, lesson_in: LessonCreate, current_user_context: TenantContext) -> Lesson:
        permission_helper.require_content_author(current_user_context, "Students cannot create lessons.")

        course = crud_course.get(db, lesson_in.course_id, context=current_user_context)
        if not course:
            raise NotFoundError("Course not found.")

        lesson_data = lesson_in.model_dump()
        if lesson_data.get("order") is None:
            lesson_data["order"] = crud_lesson.next_order(db, course.id, context=current_user_context)

        new_lesson = crud_lesson.add(db, context=current_user_context, obj_in=lesson_data)
        crud_lesson.save_changes(db)
        db.refresh(new_lesson)
        return Lesson.model_validate(new_lesson)

    def get_lesson(self, db: Session, lesson_id: uuid.UUID, current_user_context: TenantContext) -> Lesson:
        return Lesson.model_validate(self._get_or_raise(db, lesson_id, current_user_context))

    def update_lesson(self, db: Session, lesson_id: uuid.UUID, lesson_in: LessonUpdate, current_user_context: TenantContext) -> Lesson:
        permission_helper.require_content_author(current_user_context, "Students cannot update lessons.")
        lesson = self._get_or_raise(db, lesson_id, current_user_context)
        crud_lesson.update(db, context=current_user_context, db_obj=lesson, obj_in=lesson_in)
        crud_lesson.save_changes(db)
        db.refresh(lesson)
        return Lesson.model_validate(lesson)

    def delete_lesson(self, db: Session, lesson_id: uuid.UUID, current_user_context: TenantContext) -> Lesson:
        permission_helper.require_content_author(current_user_context, "Students cannot delete lessons.")
        lesson = self._get_or_raise(db, lesson_id, current_user_context)
        crud_lesson.remove(db, context=current_user_context, db_obj=lesson)
        crud_lesson.save_changes(db)
        return Lesson.model_validate(lesson)

    def get_lesson_items(self, db: Session, lesson_id: uuid.UUID, current_user_context: TenantContext) -> List[LessonItem]:
        self._get_or_raise(db, lesson_id, current_user_context)
        items = crud_lesson_item.get_by_lesson(db, lesson_id, context=current_user_context)
        return [lesson_item_service.to_schema(item, current_user_context) for item in items]

    def get_lesson_items_with_progress(self, db: Session, lesson_id: uuid.UUID, current_user_context: TenantContext) -> List[LessonItemWithProgress]:
        items = self.get_lesson_items(db, lesson_id, current_user_context)
        completed = lesson_item_progress_service.completed_item_ids(
            db, [item.id for item in items], current_user_context
        )
        return [
            LessonItemWithProgress(**item.model_dump(), is_completed=item.id in completed)
            for item in items
        ]


lesson_service = LessonService()
