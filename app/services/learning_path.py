import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.tenant import TenantContext
from app.crud.course import course as crud_course
from app.crud.learning_path import (
    learning_path as crud_learning_path,
    learning_path_course as crud_path_course,
    learning_path_section as crud_section,
)
from app.crud.learning_path_progress import learning_path_progress as crud_path_progress
from app.crud.lesson_item import lesson_item as crud_lesson_item
from app.models.course import Course as CourseModel
from app.models.learning_path import (
    LearningPath as LearningPathModel,
    LearningPathCourse as LearningPathCourseModel,
    LearningPathSection as LearningPathSectionModel,
)
from app.schemas.learning_path import (
    LearningPath,
    LearningPathCourse,
    LearningPathCourseCreate,
    LearningPathCourseDetails,
    LearningPathCourseUpdate,
    LearningPathCreate,
    LearningPathDetails,
    LearningPathSection,
    LearningPathSectionCreate,
    LearningPathSectionDetails,
    LearningPathSectionUpdate,
    LearningPathSummary,
    LearningPathUpdate,
)
from app.schemas.response import PaginatedResponse
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)

SELECTIVE_UPDATE_FIELDS = ("name", "description", "photo")

# A section paired with its path courses, both in display order.
SectionLayout = Tuple[LearningPathSectionModel, List[LearningPathCourseModel]]


class LearningPathStructure:
    """Sections, path courses and course facts of one or more learning paths, loaded in bulk."""

    def __init__(self, db: Session, paths: List[LearningPathModel], current_user_context: TenantContext):
        path_ids = [p.id for p in paths]
        sections = crud_section.find(
            db, LearningPathSectionModel.learning_path_id.in_(path_ids),
            context=current_user_context, order_by=LearningPathSectionModel.order,
        ) if path_ids else []
        path_courses = crud_path_course.get_by_learning_paths(db, path_ids, context=current_user_context)

        course_ids = {pc.course_id for pc in path_courses}
        self.courses: Dict[uuid.UUID, CourseModel] = {
            c.id: c for c in crud_course.find(db, CourseModel.id.in_(list(course_ids)), context=current_user_context)
        } if course_ids else {}
        self.course_durations = crud_lesson_item.duration_by_course(db, self.courses, context=current_user_context)

        courses_by_section: Dict[uuid.UUID, List[LearningPathCourseModel]] = defaultdict(list)
        for pc in path_courses:
            # Courses that were deleted or are out of scope drop out of the path.
            if pc.course_id in self.courses:
                courses_by_section[pc.section_id].append(pc)

        self.layouts: Dict[uuid.UUID, List[SectionLayout]] = defaultdict(list)
        for section in sections:
            self.layouts[section.learning_path_id].append((section, courses_by_section.get(section.id, [])))

    def sections_of(self, learning_path_id: uuid.UUID) -> List[SectionLayout]:
        return self.layouts.get(learning_path_id, [])

    def path_courses_of(self, learning_path_id: uuid.UUID) -> List[LearningPathCourseModel]:
        return [pc for _, courses in self.sections_of(learning_path_id) for pc in courses]

    def duration_of(self, learning_path_id: uuid.UUID) -> float:
        return sum(self.course_durations.get(pc.course_id, 0) for pc in self.path_courses_of(learning_path_id))

    def course_details(self, path_course: LearningPathCourseModel) -> LearningPathCourseDetails:
        course = self.courses[path_course.course_id]
        return LearningPathCourseDetails(
            id=path_course.id,
            order=path_course.order,
            is_required=path_course.is_required,
            course_id=course.id,
            course_name=course.name,
            course_description=course.description,
            course_photo=course.photo,
            course_duration_in_seconds=self.course_durations.get(course.id, 0),
        )


class LearningPathService:

    def get_or_raise(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathModel:
        path = crud_learning_path.get(db, learning_path_id, context=current_user_context)
        if not path:
            raise NotFoundError("Learning path not found.")
        return path

    def _get_section_or_raise(self, db: Session, section_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathSectionModel:
        section = crud_section.get(db, section_id, context=current_user_context)
        if not section or not crud_learning_path.get(db, section.learning_path_id, context=current_user_context):
            raise NotFoundError("Learning path section not found.")
        return section

    def _get_path_course_or_raise(self, db: Session, path_course_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathCourseModel:
        path_course = crud_path_course.get(db, path_course_id, context=current_user_context)
        if not path_course:
            raise NotFoundError("Learning path course not found.")
        return path_course

    def _require_course(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> CourseModel:
        course = crud_course.get(db, course_id, context=current_user_context)
        if not course:
            raise NotFoundError("Course not found.")
        return course

    def _stage_section(
        self, db: Session, path: LearningPathModel, section_in: LearningPathSectionCreate, order: int, current_user_context: TenantContext
    ) -> LearningPathSectionModel:
        section = crud_section.add(db, context=current_user_context, obj_in={
            "learning_path_id": path.id,
            "name": section_in.name,
            "description": section_in.description,
            "order": order,
        })
        seen: Set[uuid.UUID] = set()
        for course_in in section_in.courses:
            if course_in.course_id in seen:
                raise ConflictError("A course can only appear once in a section.")
            seen.add(course_in.course_id)
            self._stage_path_course(db, section, course_in, current_user_context)
        return section

    def _stage_path_course(
        self, db: Session, section: LearningPathSectionModel, course_in: LearningPathCourseCreate, current_user_context: TenantContext
    ) -> LearningPathCourseModel:
        course = self._require_course(db, course_in.course_id, current_user_context)
        return crud_path_course.add(db, context=current_user_context, obj_in={
            "learning_path_id": section.learning_path_id,
            "section_id": section.id,
            "course_id": course.id,
            "order": course_in.order,
            "is_required": course_in.is_required,
        })

    # ---- learning paths ----

    def create_learning_path(self, db: Session, path_in: LearningPathCreate, current_user_context: TenantContext) -> LearningPathDetails:
        permission_helper.require_content_author(current_user_context, "Students cannot create learning paths.")
        # Nothing is staged until every referenced course resolves in scope.
        for section_in in path_in.sections:
            for course_in in section_in.courses:
                self._require_course(db, course_in.course_id, current_user_context)

        path =crud_learning_path.add(db, context=current_user_context, obj_in={
            "name": path_in.name,
            "description": path_in.description,
            "photo": path_in.photo,
            "created_by_id": current_user_context.user_id,
        })
        for index, section_in in enumerate(path_in.sections):
            order = section_in.order if section_in.order is not None else index
            self._stage_section(db, path, section_in, order, current_user_context)

        crud_learning_path.save_changes(db)
        db.refresh(path)
        logger.info(f"Learning path {path.id} created by {current_user_context.user_id}")
        return self.get_learning_path_details(db, path.id, current_user_context)

    def summarize(
        self, db: Session, paths: List[LearningPathModel], current_user_context: TenantContext, enrolled_ids: Optional[Iterable[uuid.UUID]] = None
    ) -> List[LearningPathSummary]:
        structure = LearningPathStructure(db, paths, current_user_context)
        counts = crud_path_progress.count_by_learning_path(db, [p.id for p in paths], context=current_user_context)
        if enrolled_ids is None:
            enrolled_ids = {
                p.learning_path_id
                for p in crud_path_progress.get_by_user(db, current_user_context.user_id, context=current_user_context)
            }
        enrolled = set(enrolled_ids)
        return [
            LearningPathSummary(
                **LearningPath.model_validate(path).model_dump(),
                total_enrolled=counts.get(path.id, 0),
                duration_in_seconds=structure.duration_of(path.id),
                total_sections=len(structure.sections_of(path.id)),
                total_courses=len(structure.path_courses_of(path.id)),
                is_enrolled=path.id in enrolled,
            )
            for path in paths
        ]

    def get_learning_paths(self, db: Session, current_user_context: TenantContext) -> List[LearningPathSummary]:
        paths = crud_learning_path.get_all(db, context=current_user_context, order_by=LearningPathModel.name)
        return self.summarize(db, paths, current_user_context)

    def get_learning_paths_paged(
        self, db: Session, current_user_context: TenantContext, search: Optional[str] = None, page: int = 1, size: int = 20
    ) -> PaginatedResponse[LearningPath]:
        paged = crud_learning_path.search_paged(db, context=current_user_context, search=search, page=page, size=size)
        return PaginatedResponse[LearningPath](
            **paged.model_dump(exclude={"items"}),
            items=[LearningPath.model_validate(p) for p in paged.items],
        )

    def get_learning_path_details(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathDetails:
        path = self.get_or_raise(db, learning_path_id, current_user_context)
        summary = self.summarize(db, [path], current_user_context)[0]
        structure = LearningPathStructure(db, [path], current_user_context)
        sections = [
            LearningPathSectionDetails(
                id=section.id,
                name=section.name,
                description=section.description,
                order=section.order,
                courses=[structure.course_details(pc) for pc in courses],
            )
            for section, courses in structure.sections_of(path.id)
        ]
        return LearningPathDetails(**summary.model_dump(), sections=sections)

    def update_learning_path(
        self, db: Session, learning_path_id: uuid.UUID, path_in: LearningPathUpdate, current_user_context: TenantContext
    ) -> LearningPath:
        permission_helper.require_content_author(current_user_context, "Students cannot update learning paths.")
        path = self.get_or_raise(db, learning_path_id, current_user_context)

        changed = []
        for field in SELECTIVE_UPDATE_FIELDS:
            value = getattr(path_in, field)
            if value is not None and str(value).strip():
                setattr(path, field, value)
                changed.append(field)

        crud_learning_path.update(db, context=current_user_context, db_obj=path, fields=changed)
        crud_learning_path.save_changes(db)
        db.refresh(path)
        return LearningPath.model_validate(path)

    def delete_learning_path(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> LearningPath:
        permission_helper.require_content_author(current_user_context, "Students cannot delete learning paths.")
        path = self.get_or_raise(db, learning_path_id, current_user_context)
        crud_learning_path.remove(db, context=current_user_context, db_obj=path)
        crud_learning_path.save_changes(db)
        logger.info(f"Learning path {path.id} soft-deleted by {current_user_context.user_id}")
        return LearningPath.model_validate(path)

    # ---- sections ----

    def get_sections(self, db: Session, learning_path_id: uuid.UUID, current_user_context: TenantContext) -> List[LearningPathSection]:
        path = self.get_or_raise(db, learning_path_id, current_user_context)
        return [
            LearningPathSection.model_validate(s)
            for s in crud_section.get_by_learning_path(db, path.id, context=current_user_context)
        ]

    def get_section(self, db: Session, section_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathSection:
        return LearningPathSection.model_validate(self._get_section_or_raise(db, section_id, current_user_context))

    def create_section(
        self, db: Session, learning_path_id: uuid.UUID, section_in: LearningPathSectionCreate, current_user_context: TenantContext
    ) -> LearningPathSection:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        path = self.get_or_raise(db, learning_path_id, current_user_context)
        order = section_in.order
        if order is None:
            order = crud_section.next_order(db, path.id, context=current_user_context)

        section = self._stage_section(db, path, section_in, order, current_user_context)
        crud_section.save_changes(db)
        db.refresh(section)
        return LearningPathSection.model_validate(section)

    def update_section(
        self, db: Session, section_id: uuid.UUID, section_in: LearningPathSectionUpdate, current_user_context: TenantContext
    ) -> LearningPathSection:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        section = self._get_section_or_raise(db, section_id, current_user_context)
        crud_section.update(db, context=current_user_context, db_obj=section, obj_in=section_in)
        crud_section.save_changes(db)
        db.refresh(section)
        return LearningPathSection.model_validate(section)

    def delete_section(self, db: Session, section_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathSection:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        section = self._get_section_or_raise(db, section_id, current_user_context)
        crud_section.remove(db, context=current_user_context, db_obj=section)
        for path_course in crud_path_course.get_by_section(db, section.id, context=current_user_context):
            crud_path_course.remove(db, context=current_user_context, db_obj=path_course)
        crud_section.save_changes(db)
        return LearningPathSection.model_validate(section)

    # ---- courses within a section ----

    def get_section_courses(self, db: Session, section_id: uuid.UUID, current_user_context: TenantContext) -> List[LearningPathCourse]:
        section = self._get_section_or_raise(db, section_id, current_user_context)
        return [
            LearningPathCourse.model_validate(pc)
            for pc in crud_path_course.get_by_section(db, section.id, context=current_user_context)
        ]

    def add_course(
        self, db: Session, section_id: uuid.UUID, course_in: LearningPathCourseCreate, current_user_context: TenantContext
    ) -> LearningPathCourse:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        section = self._get_section_or_raise(db, section_id, current_user_context)
        self._require_course(db, course_in.course_id, current_user_context)

        existing = crud_path_course.get_by_section_and_course(db, section.id, course_in.course_id, context=current_user_context)
        if existing and not existing.is_deleted:
            raise ConflictError("This course is already part of the section.")

        if existing:
            existing.order = course_in.order
            existing.is_required = course_in.is_required
            crud_path_course.update(db, context=current_user_context, db_obj=existing, fields=["order", "is_required"])
            path_course = crud_path_course.restore(db, context=current_user_context, db_obj=existing)
        else:
            path_course = self._stage_path_course(db, section, course_in, current_user_context)

        crud_path_course.save_changes(db)
        db.refresh(path_course)
        return LearningPathCourse.model_validate(path_course)

    def update_path_course(
        self, db: Session, path_course_id: uuid.UUID, course_in: LearningPathCourseUpdate, current_user_context: TenantContext
    ) -> LearningPathCourse:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        path_course = self._get_path_course_or_raise(db, path_course_id, current_user_context)
        crud_path_course.update(db, context=current_user_context, db_obj=path_course, obj_in=course_in, fields=["order", "is_required"])
        crud_path_course.save_changes(db)
        db.refresh(path_course)
        return LearningPathCourse.model_validate(path_course)

    def remove_path_course(self, db: Session, path_course_id: uuid.UUID, current_user_context: TenantContext) -> LearningPathCourse:
        permission_helper.require_content_author(current_user_context, "Students cannot change learning paths.")
        path_course = self._get_path_course_or_raise(db, path_course_id, current_user_context)
        crud_path_course.remove(db, context=current_user_context, db_obj=path_course)
        crud_path_course.save_changes(db)
        return LearningPathCourse.model_validate(path_course)


learning_path_service = LearningPathService()
