import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.category import category as crud_category
from app.crud.course import course as crud_course
from app.crud.lesson import lesson as crud_lesson
from app.models.course import Course as CourseModel
from app.schemas.course import CourseCreate, CourseUpdate, Course, CourseProgress
from app.schemas.lesson import Lesson
from app.services.lesson_item_progress import lesson_item_progress_service
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)

COURSE_ORDER_FIELDS = {"name", "created_at", "updated_at"}
SELECTIVE_UPDATE_FIELDS = ("name", "description", "photo")


class CourseService:

    def _get_or_raise(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext, include_deleted: bool = False) -> CourseModel:
        course = crud_course.get(db, course_id, context=current_user_context, include_deleted=include_deleted)
        if not course:
            raise NotFoundError("Course not found.")
        return course

    def _require_category(self, db: Session, category_id: Optional[uuid.UUID], current_user_context: TenantContext):
        if category_id and not crud_category.get(db, category_id, context=current_user_context):
            raise NotFoundError("Category not found.")

    def create_course(self, db: Session, course_in: CourseCreate, current_user_context: TenantContext) -> Course:
        permission_helper.require_content_author(current_user_context, "Students cannot create courses.")
        self._require_category(db, course_in.category_id, current_user_context)

        course_data = course_in.model_dump()
        course_data["created_by_id"] = current_user_context.user_id
        new_course = crud_course.add(db, context=current_user_context, obj_in=course_data)
        crud_course.save_changes(db)
        db.refresh(new_course)

        logger.info(f"Course {new_course.id} created by {current_user_context.user_id}")
        return Course.model_validate(new_course)

    def get_course(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Course:
        return Course.model_validate(self._get_or_raise(db, course_id, current_user_context))

    def get_courses(
        self, db: Session, current_user_context: TenantContext, order_by: Optional[str] = None, descending: bool = False
    ) -> List[Course]:
        if order_by is not None and order_by not in COURSE_ORDER_FIELDS:
            raise ValidationFailedError(f"Cannot order courses by '{order_by}'.")
        courses = crud_course.get_all(db, context=current_user_context, order_by=order_by, descending=descending)
        return [Course.model_validate(c) for c in courses]

    def get_courses_by_category(self, db: Session, category_id: uuid.UUID, current_user_context: TenantContext) -> List[Course]:
        self._require_category(db, category_id, current_user_context)
        courses = crud_course.get_by_category(db, category_id, context=current_user_context)
        return [Course.model_validate(c) for c in courses]

    def update_course(self, db: Session, course_id: uuid.UUID, course_in: CourseUpdate, current_user_context: TenantContext) -> Course:
        permission_helper.require_content_author(current_user_context, "Students cannot update courses.")
        course = self._get_or_raise(db, course_id, current_user_context)

        # Blank values leave the stored ones alone.
        changed = []
        for field in SELECTIVE_UPDATE_FIELDS:
            value = getattr(course_in, field)
            if value is not None and str(value).strip():
                setattr(course, field, value)
                changed.append(field)

        crud_course.update(db, context=current_user_context, db_obj=course, fields=changed)
        crud_course.save_changes(db)
        db.refresh(course)
        return Course.model_validate(course)

    def delete_course(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Course:
        permission_helper.require_content_author(current_user_context, "Students cannot delete courses.")
        course = self._get_or_raise(db, course_id, current_user_context)
        crud_course.remove(db, context=current_user_context, db_obj=course)
        crud_course.save_changes(db)
        logger.info(f"Course {course.id} soft-deleted by {current_user_context.user_id}")
        return Course.model_validate(course)

    def restore_course(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Course:
        permission_helper.require_content_author(current_user_context, "Students cannot restore courses.")
        course = self._get_or_raise(db, course_id, current_user_context, include_deleted=True)
        crud_course.restore(db, context=current_user_context, db_obj=course)
        crud_course.save_changes(db)
        db.refresh(course)
        return Course.model_validate(course)

    def get_course_lessons(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> List[Lesson]:
        self._get_or_raise(db, course_id, current_user_context)
        lessons = crud_lesson.get_by_course(db, course_id, context=current_user_context)
        return [Lesson.model_validate(l) for l in lessons]

    def get_course_progress(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> CourseProgress:
        self._get_or_raise(db, course_id, current_user_context)
        return lesson_item_progress_service.get_course_progress(db, course_id, current_user_context)


course_service = CourseService()
