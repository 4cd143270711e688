import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.tenant import TenantContext
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.learning_path_progress import learning_path_progress as crud_path_progress
from app.crud.lesson_item_progress import lesson_item_progress as crud_item_progress
from app.models.base import utcnow
from app.models.learning_path_progress import LearningPathProgress as LearningPathProgressModel
from app.schemas.learning_path import (
    LearningPathCourseProgress,
    LearningPathEnrollment,
    LearningPathEnrollmentStatus,
    LearningPathProgress,
    LearningPathSectionProgress,
    LearningPathSummary,
)
from app.services.learning_path import LearningPathStructure, learning_path_service

logger = logging.getLogger(__name__)

POSITION_FIELDS = ["current_section_id", "current_course_id", "completed_duration_in_seconds", "is_completed", "completed_at"]


class LearningPathProgressService:

    def _get_or_raise(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathProgressModel:
        progress = crud_path_progress.get_by_user_and_learning_path(
            db, current_user_context.user_id, learning_path_id, context=current_user_context
        )
        if not progress:
            raise NotFoundError("You are not enrolled in this learning path.")
        return progress

    def enroll(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathEnrollment:
        path = learning_path_service.get_or_raise(db, learning_path_id, current_user_context)

        existing = crud_path_progress.get_by_user_and_learning_path(
            db, current_user_context.user_id, path.id, context=current_user_context, include_deleted=True
        )
        if existing and not existing.is_deleted:
            raise ConflictError("You are already enrolled in this learning path.")

        structure = LearningPathStructure(db, [path], current_user_context)
        first_section_id = first_course_id = None
        for section, courses in structure.sections_of(path.id):
            if courses:
                first_section_id, first_course_id = section.id, courses[0].course_id
                break

        if existing:
            existing.enrolled_at = utcnow()
            existing.current_section_id = first_section_id
            existing.current_course_id = first_course_id
            existing.completed_duration_in_seconds = 0
            existing.is_completed = False
            existing.completed_at = None
            crud_path_progress.update(db, context=current_user_context, db_obj=existing, fields=["enrolled_at", *POSITION_FIELDS])
            progress = crud_path_progress.restore(db, context=current_user_context, db_obj=existing)
        else:
            progress = crud_path_progress.add(db, context=current_user_context, obj_in={
                "user_id": current_user_context.user_id,
                "learning_path_id": path.id,
                "enrolled_at": utcnow(),
                "current_section_id": first_section_id,
                "current_course_id": first_course_id,
            })

        crud_path_progress.save_changes(db)
        db.refresh(progress)
        logger.info(f"User {current_user_context.user_id} enrolled in learning path {path.id}")
        return LearningPathEnrollment.model_validate(progress)

    def unenroll(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathEnrollment:
        progress = self._get_or_raise(db, learning_path_id, current_user_context)
        crud_path_progress.remove(db, context=current_user_context, db_obj=progress)
        crud_path_progress.save_changes(db)
        logger.info(f"User {current_user_context.user_id} unenrolled from learning path {learning_path_id}")
        return LearningPathEnrollment.model_validate(progress)

    def get_enrollment_status(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathEnrollmentStatus:
        learning_path_service.get_or_raise(db, learning_path_id, current_user_context)
        progress = crud_path_progress.get_by_user_and_learning_path(
            db, current_user_context.user_id, learning_path_id, context=current_user_context
        )
        if not progress:
            return LearningPathEnrollmentStatus(is_enrolled=False)
        return LearningPathEnrollmentStatus(is_enrolled=True, enrolled_at=progress.enrolled_at)

    def get_my_learning_paths(self, db: Session, current_user_context: TenantContext) -> List[LearningPathSummary]:
        enrollments = crud_path_progress.get_by_user(db, current_user_context.user_id, context=current_user_context)
        # Enrollments whose learning path was soft-deleted are hidden.
        paths = [e.learning_path for e in enrollments if e.learning_path is not None and not e.learning_path.is_deleted]
        return learning_path_service.summarize(db, paths, current_user_context, enrolled_ids=[p.id for p in paths])

    def get_learning_path_progress(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathProgress:
        """Work out where the caller stands in a learning path and store the result.

        The current course is the first course, in section then course order,
        whose enrollment is not completed. The path counts as completed once
        every required course is; a path without required courses never does.
        """
        path = learning_path_service.get_or_raise(db, learning_path_id, current_user_context)
        progress = self._get_or_raise(db, path.id, current_user_context)
        structure = LearningPathStructure(db, [path], current_user_context)
        user_id = current_user_context.user_id

        path_courses = structure.path_courses_of(path.id)
        course_ids = {pc.course_id for pc in path_courses}
        enrollments = {
            e.course_id: e
            for e in crud_enrollment.get_by_user_and_courses(db, user_id, course_ids, context=current_user_context)
        }
        completed_durations = crud_item_progress.completed_duration_by_course(db, user_id, course_ids, context=current_user_context)

        def is_course_completed(course_id: uuid.UUID) -> bool:
            enrollment = enrollments.get(course_id)
            return enrollment is not None and enrollment.is_completed

        current_section_id: Optional[uuid.UUID] = None
        current_course_id: Optional[uuid.UUID] = None
        for section, courses in structure.sections_of(path.id):
            pending = next((pc for pc in courses if not is_course_completed(pc.course_id)), None)
            if pending:
                current_section_id, current_course_id = section.id, pending.course_id
                break

        required = [pc for pc in path_courses if pc.is_required]
        is_completed = bool(required) and all(is_course_completed(pc.course_id) for pc in required)

        progress.current_section_id = current_section_id
        progress.current_course_id = current_course_id
        progress.completed_duration_in_seconds = sum(completed_durations.get(course_id, 0) for course_id in course_ids)
        if is_completed and not progress.is_completed:
            progress.completed_at = utcnow()
            logger.info(f"User {user_id} completed learning path {path.id}")
        elif not is_completed:
            progress.completed_at = None
        progress.is_completed = is_completed
        crud_path_progress.update(db, context=current_user_context, db_obj=progress, fields=POSITION_FIELDS)
        crud_path_progress.save_changes(db)
        db.refresh(progress)

        duration = structure.duration_of(path.id)
        if duration:
            percentage = min(100, round(100 * progress.completed_duration_in_seconds / duration))
        else:
            percentage = 100 if is_completed else 0

        sections = [
            LearningPathSectionProgress(
                id=section.id,
                name=section.name,
                description=section.description,
                order=section.order,
                is_current_section=section.id == current_section_id,
                courses=[
                    LearningPathCourseProgress(
                        **structure.course_details(pc).model_dump(),
                        is_enrolled=pc.course_id in enrollments,
                        is_completed=is_course_completed(pc.course_id),
                        is_current_course=section.id == current_section_id and pc.course_id == current_course_id,
                    )
                    for pc in courses
                ],
            )
            for section, courses in structure.sections_of(path.id)
        ]

        return LearningPathProgress(
            **LearningPathEnrollment.model_validate(progress).model_dump(),
            name=path.name,
            description=path.description,
            photo=path.photo,
            duration_in_seconds=duration,
            percentage=percentage,
            sections=sections,
        )


learning_path_progress_service = LearningPathProgressService()
