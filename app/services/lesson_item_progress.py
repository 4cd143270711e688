import logging
import uuid
from typing import Iterable, Optional, Set

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.tenant import TenantContext
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson_item import lesson_item as crud_lesson_item
from app.crud.lesson_item_progress import lesson_item_progress as crud_progress
from app.models.base import utcnow
from app.models.enrollment import Enrollment as EnrollmentModel
from app.models.lesson_item import LessonItem as LessonItemModel
from app.models.lesson_item_progress import LessonItemProgress as ProgressModel
from app.schemas.course import CourseProgress
from app.schemas.progress import LessonItemProgress

logger = logging.getLogger(__name__)

PROGRESS_FIELDS = ["is_completed", "completed_at", "completed_duration_in_seconds"]
ENROLLMENT_PROGRESS_FIELDS = ["last_lesson_item_id", "completed_duration_in_seconds", "is_completed", "completed_at"]


class LessonItemProgressService:

    def get_lesson_item_or_raise(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext) -> LessonItemModel:
        item = crud_lesson_item.get(db, lesson_item_id, context=current_user_context)
        if not item:
            raise NotFoundError("Lesson item not found.")
        return item

    def get_enrollment_or_raise(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> EnrollmentModel:
        enrollment = crud_enrollment.get_by_user_and_course(
            db, current_user_context.user_id, course_id, context=current_user_context
        )
        if not enrollment:
            raise NotFoundError("You are not enrolled in this course.")
        return enrollment

    def stage_completion(
        self,
        db: Session,
        item: LessonItemModel,
        current_user_context: TenantContext,
        completed_duration_in_seconds: Optional[float] = None,
    ) -> ProgressModel:
        """Upsert the caller's progress row for ``item`` and roll it up into the enrollment.

        Changes are staged on the session only; the caller commits.
        """
        enrollment = self.get_enrollment_or_raise(db, item.course_id, current_user_context)
        duration = item.duration_in_seconds if completed_duration_in_seconds is None else completed_duration_in_seconds
        now = utcnow()

        progress = crud_progress.get_by_user_and_item(db, current_user_context.user_id, item.id, context=current_user_context)
        if progress is None:
            progress = crud_progress.add(db, context=current_user_context, obj_in={
                "user_id": current_user_context.user_id,
                "lesson_item_id": item.id,
                "lesson_id": item.lesson_id,
                "course_id": item.course_id,
                "is_completed": True,
                "completed_at": now,
                "completed_duration_in_seconds": duration,
            })
        else:
            if not progress.is_completed:
                progress.completed_at = now
            progress.is_completed = True
            progress.completed_duration_in_seconds = duration
            crud_progress.update(db, context=current_user_context, db_obj=progress, fields=PROGRESS_FIELDS)
            # update() discards a pending is_deleted change, so restore comes last.
            if progress.is_deleted:
                crud_progress.restore(db, context=current_user_context, db_obj=progress)

        self._roll_up_enrollment(db, enrollment, progress, current_user_context)
        return progress

    def _roll_up_enrollment(self, db: Session, enrollment: EnrollmentModel, progress: ProgressModel, current_user_context: TenantContext):
        # The staged row is not flushed yet, so it is merged over what the database holds.
        completed = {
            p.lesson_item_id: p
            for p in crud_progress.get_completed_for_course(
                db, current_user_context.user_id, enrollment.course_id, context=current_user_context
            )
        }
        completed[progress.lesson_item_id] = progress

        course_item_ids = {
            item.id for item in crud_lesson_item.get_by_course(db, enrollment.course_id, context=current_user_context)
        }
        completed_in_course = [p for item_id, p in completed.items() if item_id in course_item_ids]

        enrollment.last_lesson_item_id = progress.lesson_item_id
        enrollment.completed_duration_in_seconds = sum(p.completed_duration_in_seconds or 0 for p in completed_in_course)
        if course_item_ids and len(completed_in_course) >= len(course_item_ids) and not enrollment.is_completed:
            enrollment.is_completed = True
            enrollment.completed_at = utcnow()
            logger.info(f"User {enrollment.user_id} completed course {enrollment.course_id}")

        crud_enrollment.update(db, context=current_user_context, db_obj=enrollment, fields=ENROLLMENT_PROGRESS_FIELDS)

    def mark_item_completed(
        self,
        db: Session,
        lesson_item_id: uuid.UUID,
        current_user_context: TenantContext,
        completed_duration_in_seconds: Optional[float] = None,
    ) -> LessonItemProgress:
        for attempt in (1, 2):
            item = self.get_lesson_item_or_raise(db, lesson_item_id, current_user_context)
            try:
                progress = self.stage_completion(db, item, current_user_context, completed_duration_in_seconds)
                crud_progress.save_changes(db)
                break
            except ConflictError:
                # A concurrent writer inserted the same progress row; the retry finds and updates it.
                if attempt == 2:
                    raise
                logger.info(f"Progress for item {lesson_item_id} was created concurrently, retrying as update")

        db.refresh(progress)
        return LessonItemProgress.model_validate(progress)

    def completed_item_ids(self, db: Session, lesson_item_ids: Iterable[uuid.UUID], current_user_context: TenantContext) -> Set[uuid.UUID]:
        rows = crud_progress.get_by_user_and_items(
            db, current_user_context.user_id, lesson_item_ids, context=current_user_context
        )
        return {row.lesson_item_id for row in rows if row.is_completed}

    def get_course_progress(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> CourseProgress:
        item_ids = [item.id for item in crud_lesson_item.get_by_course(db, course_id, context=current_user_context)]
        completed = self.completed_item_ids(db, item_ids, current_user_context)
        total = len(item_ids)
        return CourseProgress(
            course_id=course_id,
            completed_items=len(completed),
            total_items=total,
            percentage=round(100 * len(completed) / total) if total else 0,
        )


lesson_item_progress_service = LessonItemProgressService()
