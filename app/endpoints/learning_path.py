import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.learning_path import (
    LearningPath,
    LearningPathCourse,
    LearningPathCourseCreate,
    LearningPathCourseUpdate,
    LearningPathCreate,
    LearningPathDetails,
    LearningPathEnrollment,
    LearningPathEnrollmentStatus,
    LearningPathProgress,
    LearningPathSection,
    LearningPathSectionCreate,
    LearningPathSectionUpdate,
    LearningPathSummary,
    LearningPathUpdate,
)
from app.schemas.response import APIResponse, PaginatedResponse
from app.services.learning_path import learning_path_service
from app.services.learning_path_progress import learning_path_progress_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[LearningPathDetails], status_code=status.HTTP_201_CREATED)
def create_learning_path(
    *,
    db: Session = Depends(deps.get_db),
    path_in: LearningPathCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path = learning_path_service.create_learning_path(db, path_in=path_in, current_user_context=context)
    return APIResponse(message="Learning path created successfully", data=path)


@router.get("/", response_model=APIResponse[List[LearningPathSummary]])
def get_learning_paths(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    paths = learning_path_service.get_learning_paths(db, current_user_context=context)
    return APIResponse(message="Learning paths retrieved successfully", data=paths)


@router.get("/paged", response_model=APIResponse[PaginatedResponse[LearningPath]])
def get_learning_paths_paged(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100)
):
    paths = learning_path_service.get_learning_paths_paged(
        db, current_user_context=context, search=search, page=page, size=size
    )
    return APIResponse(message="Learning paths retrieved successfully", data=paths)


@router.get("/me", response_model=APIResponse[List[LearningPathSummary]])
def get_my_learning_paths(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    paths = learning_path_progress_service.get_my_learning_paths(db, current_user_context=context)
    return APIResponse(message="Enrolled learning paths retrieved successfully", data=paths)


@router.get("/sections/{section_id}", response_model=APIResponse[LearningPathSection])
def read_section(
    section_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    section = learning_path_service.get_section(db, section_id=section_id, current_user_context=context)
    return APIResponse(message="Section retrieved successfully", data=section)


@router.put("/sections/{section_id}", response_model=APIResponse[LearningPathSection])
def update_section(
    *,
    db: Session = Depends(deps.get_db),
    section_id: uuid.UUID,
    section_in: LearningPathSectionUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    section = learning_path_service.update_section(db, section_id=section_id, section_in=section_in, current_user_context=context)
    return APIResponse(message="Section updated successfully", data=section)


@router.delete("/sections/{section_id}", response_model=APIResponse[LearningPathSection])
def delete_section(
    section_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    section = learning_path_service.delete_section(db, section_id=section_id, current_user_context=context)
    return APIResponse(message="Section deleted successfully", data=section)


@router.get("/sections/{section_id}/courses", response_model=APIResponse[List[LearningPathCourse]])
def get_section_courses(
    section_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    courses = learning_path_service.get_section_courses(db, section_id=section_id, current_user_context=context)
    return APIResponse(message="Section courses retrieved successfully", data=courses)


@router.post("/sections/{section_id}/courses", response_model=APIResponse[LearningPathCourse], status_code=status.HTTP_201_CREATED)
def add_course_to_section(
    *,
    db: Session = Depends(deps.get_db),
    section_id: uuid.UUID,
    course_in: LearningPathCourseCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path_course = learning_path_service.add_course(db, section_id=section_id, course_in=course_in, current_user_context=context)
    return APIResponse(message="Course added to section successfully", data=path_course)


@router.put("/sections/courses/{path_course_id}", response_model=APIResponse[LearningPathCourse])
def update_path_course(
    *,
    db: Session = Depends(deps.get_db),
    path_course_id: uuid.UUID,
    course_in: LearningPathCourseUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path_course = learning_path_service.update_path_course(
        db, path_course_id=path_course_id, course_in=course_in, current_user_context=context
    )
    return APIResponse(message="Section course updated successfully", data=path_course)


@router.delete("/sections/courses/{path_course_id}", response_model=APIResponse[LearningPathCourse])
def remove_path_course(
    path_course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path_course = learning_path_service.remove_path_course(db, path_course_id=path_course_id, current_user_context=context)
    return APIResponse(message="Course removed from section successfully", data=path_course)


@router.get("/{learning_path_id}", response_model=APIResponse[LearningPathDetails])
def read_learning_path(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path = learning_path_service.get_learning_path_details(db, learning_path_id=learning_path_id, current_user_context=context)
    return APIResponse(message="Learning path retrieved successfully", data=path)


@router.put("/{learning_path_id}", response_model=APIResponse[LearningPath])
def update_learning_path(
    *,
    db: Session = Depends(deps.get_db),
    learning_path_id: uuid.UUID,
    path_in: LearningPathUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path = learning_path_service.update_learning_path(
        db, learning_path_id=learning_path_id, path_in=path_in, current_user_context=context
    )
    return APIResponse(message="Learning path updated successfully", data=path)


@router.delete("/{learning_path_id}", response_model=APIResponse[LearningPath])
def delete_learning_path(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    path = learning_path_service.delete_learning_path(db, learning_path_id=learning_path_id, current_user_context=context)
    return APIResponse(message="Learning path deleted successfully", data=path)


@router.get("/{learning_path_id}/sections", response_model=APIResponse[List[LearningPathSection]])
def get_sections(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    sections = learning_path_service.get_sections(db, learning_path_id=learning_path_id, current_user_context=context)
    return APIResponse(message="Sections retrieved successfully", data=sections)


@router.post("/{learning_path_id}/sections", response_model=APIResponse[LearningPathSection], status_code=status.HTTP_201_CREATED)
def create_section(
    *,
    db: Session = Depends(deps.get_db),
    learning_path_id: uuid.UUID,
    section_in: LearningPathSectionCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    section = learning_path_service.create_section(
        db, learning_path_id=learning_path_id, section_in=section_in, current_user_context=context
    )
    return APIResponse(message="Section created successfully", data=section)


@router.post("/{learning_path_id}/enroll", response_model=APIResponse[LearningPathEnrollment], status_code=status.HTTP_201_CREATED)
def enroll(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = learning_path_progress_service.enroll(db, learning_path_id=learning_path_id, current_user_context=context)
    return APIResponse(message="Enrolled successfully", data=enrollment)


@router.delete("/{learning_path_id}/enroll", response_model=APIResponse[LearningPathEnrollment])
def unenroll(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = learning_path_progress_service.unenroll(db, learning_path_id=learning_path_id, current_user_context=context)
    return APIResponse(message="Unenrolled successfully", data=enrollment)


@router.get("/{learning_path_id}/enrollment", response_model=APIResponse[LearningPathEnrollmentStatus])
def get_enrollment_status(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment_status = learning_path_progress_service.get_enrollment_status(
        db, learning_path_id=learning_path_id, current_user_context=context
    )
    return APIResponse(message="Enrollment status retrieved successfully", data=enrollment_status)


@router.get("/{learning_path_id}/progress", response_model=APIResponse[LearningPathProgress])
def get_learning_path_progress(
    learning_path_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    progress = learning_path_progress_service.get_learning_path_progress(
        db, learning_path_id=learning_path_id, current_user_context=context
    )
    return APIResponse(message="Learning path progress retrieved successfully", data=progress)
