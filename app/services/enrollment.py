import logging
import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.course import course as crud_course
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson_item import lesson_item as crud_lesson_item
from app.models.base import utcnow
from app.models.enrollment import Enrollment as EnrollmentModel
from app.schemas.enrollment import Enrollment, EnrollmentWithCourse

logger = logging.getLogger(__name__)


class EnrollmentService:

    def _get_or_raise(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> EnrollmentModel:
        enrollment = crud_enrollment.get_by_user_and_course(
            db, current_user_context.user_id, course_id, context=current_user_context
        )
        if not enrollment:
            raise NotFoundError("Enrollment not found.")
        return enrollment

    def enroll(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Enrollment:
        course = crud_course.get(db, course_id, context=current_user_context)
        if not course:
            raise NotFoundError("Course not found.")

        existing = crud_enrollment.get_by_user_and_course(
            db, current_user_context.user_id, course.id, context=current_user_context, include_deleted=True
        )
        if existing and not existing.is_deleted:
            raise ConflictError("You are already enrolled in this course.")

        if existing:
            existing.enrolled_at = utcnow()
            crud_enrollment.update(db, context=current_user_context, db_obj=existing, fields=["enrolled_at"])
            enrollment = crud_enrollment.restore(db, context=current_user_context, db_obj=existing)
        else:
            enrollment = crud_enrollment.add(db, context=current_user_context, obj_in={
                "user_id": current_user_context.user_id,
                "course_id": course.id,
                "enrolled_at": utcnow(),
            })

        # A concurrent enrollment loses on the unique (user_id, course_id) constraint and surfaces as a conflict.
        crud_enrollment.save_changes(db)
        db.refresh(enrollment)
        logger.info(f"User {current_user_context.user_id} enrolled in course {course.id}")
        return Enrollment.model_validate(enrollment)

    def unenroll(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Enrollment:
        enrollment = self._get_or_raise(db, course_id, current_user_context)
        crud_enrollment.remove(db, context=current_user_context, db_obj=enrollment)
        crud_enrollment.save_changes(db)
        logger.info(f"User {current_user_context.user_id} unenrolled from course {course_id}")
        return Enrollment.model_validate(enrollment)

    def get_my_enrollments(self, db: Session, current_user_context: TenantContext) -> List[EnrollmentWithCourse]:
        enrollments = crud_enrollment.get_by_user(db, current_user_context.user_id, context=current_user_context)
        # Enrollments whose course was soft-deleted are hidden.
        return [
            EnrollmentWithCourse.model_validate(e)
            for e in enrollments
            if e.course is not None and not e.course.is_deleted
        ]

    def get_enrollment(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Enrollment:
        return Enrollment.model_validate(self._get_or_raise(db, course_id, current_user_context))

    def toggle_favourite(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> Enrollment:
        enrollment = self._get_or_raise(db, course_id, current_user_context)
        enrollment.is_favourite = not enrollment.is_favourite
        crud_enrollment.update(db, context=current_user_context, db_obj=enrollment, fields=["is_favourite"])
        crud_enrollment.save_changes(db)
        db.refresh(enrollment)
        return Enrollment.model_validate(enrollment)

    def set_last_lesson_item(
        self, db: Session, course_id: uuid.UUID, lesson_item_id: uuid.UUID, current_user_context: TenantContext
    ) -> Enrollment:
        enrollment = self._get_or_raise(db, course_id, current_user_context)

        item = crud_lesson_item.get(db, lesson_item_id, context=current_user_context)
        if not item:
            raise NotFoundError("Lesson item not found.")
        if item.course_id != enrollment.course_id:
            raise ValidationFailedError("Lesson item does not belong to this course.")

        enrollment.last_lesson_item_id = item.id
        crud_enrollment.update(db, context=current_user_context, db_obj=enrollment, fields=["last_lesson_item_id"])
        crud_enrollment.save_changes(db)
        db.refresh(enrollment)
        return Enrollment.model_validate(enrollment)


enrollment_service = EnrollmentService()
