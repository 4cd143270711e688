import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.enrollment import Enrollment, EnrollmentCreate, EnrollmentWithCourse, LastLessonItemUpdate
from app.schemas.response import APIResponse
from app.services.enrollment import enrollment_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Enrollment], status_code=status.HTTP_201_CREATED)
def enroll(
    *,
    db: Session = Depends(deps.get_db),
    enrollment_in: EnrollmentCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = enrollment_service.enroll(db, course_id=enrollment_in.course_id, current_user_context=context)
    return APIResponse(message="Enrolled successfully", data=enrollment)


@router.get("/me", response_model=APIResponse[List[EnrollmentWithCourse]])
def get_my_enrollments(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollments = enrollment_service.get_my_enrollments(db, current_user_context=context)
    return APIResponse(message="Enrollments retrieved successfully", data=enrollments)


@router.get("/courses/{course_id}", response_model=APIResponse[Enrollment])
def read_enrollment(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = enrollment_service.get_enrollment(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Enrollment retrieved successfully", data=enrollment)


@router.delete("/courses/{course_id}", response_model=APIResponse[Enrollment])
def unenroll(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = enrollment_service.unenroll(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Unenrolled successfully", data=enrollment)


@router.post("/courses/{course_id}/favourite", response_model=APIResponse[Enrollment])
def toggle_favourite(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = enrollment_service.toggle_favourite(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Favourite toggled successfully", data=enrollment)


@router.put("/courses/{course_id}/last-lesson-item", response_model=APIResponse[Enrollment])
def set_last_lesson_item(
    *,
    db: Session = Depends(deps.get_db),
    course_id: uuid.UUID,
    update_in: LastLessonItemUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    enrollment = enrollment_service.set_last_lesson_item(
        db, course_id=course_id, lesson_item_id=update_in.lesson_item_id, current_user_context=context
    )
    return APIResponse(message="Last visited lesson item updated", data=enrollment)
