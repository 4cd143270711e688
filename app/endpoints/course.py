import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.course import Course, CourseCreate, CourseUpdate, CourseProgress
from app.schemas.lesson import Lesson
from app.schemas.lesson_item import LessonItem
from app.schemas.response import APIResponse
from app.schemas.review import Review, ReviewStatistics
from app.services.course import course_service
from app.services.lesson_item import lesson_item_service
from app.services.review import review_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
def create_course(
    *,
    db: Session = Depends(deps.get_db),
    course_in: CourseCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    new_course = course_service.create_course(db, course_in=course_in, current_user_context=context)
    return APIResponse(message="Course created successfully", data=new_course)


@router.get("/", response_model=APIResponse[List[Course]])
def get_all_courses(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context),
    order_by: Optional[str] = Query(None, description="One of name, created_at, updated_at"),
    descending: bool = False
):
    courses = course_service.get_courses(db, current_user_context=context, order_by=order_by, descending=descending)
    return APIResponse(message="Courses retrieved successfully", data=courses)


@router.get("/{course_id}", response_model=APIResponse[Course])
def read_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: uuid.UUID,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    course = course_service.get_course(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course retrieved successfully", data=course)


@router.put("/{course_id}", response_model=APIResponse[Course])
def update_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: uuid.UUID,
    course_in: CourseUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    updated_course = course_service.update_course(db, course_id=course_id, course_in=course_in, current_user_context=context)
    return APIResponse(message="Course updated successfully", data=updated_course)


@router.delete("/{course_id}", response_model=APIResponse[Course])
def delete_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: uuid.UUID,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    deleted_course = course_service.delete_course(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course deleted successfully", data=deleted_course)


@router.post("/{course_id}/restore", response_model=APIResponse[Course])
def restore_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: uuid.UUID,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    course = course_service.restore_course(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course restored successfully", data=course)


@router.get("/{course_id}/lessons", response_model=APIResponse[List[Lesson]])
def get_course_lessons(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    lessons = course_service.get_course_lessons(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Lessons retrieved successfully", data=lessons)


@router.get("/{course_id}/items", response_model=APIResponse[List[LessonItem]])
def get_course_items(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    course_service.get_course(db, course_id=course_id, current_user_context=context)
    items = lesson_item_service.get_course_items(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Lesson items retrieved successfully", data=items)


@router.get("/{course_id}/progress", response_model=APIResponse[CourseProgress])
def get_course_progress(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    progress = course_service.get_course_progress(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course progress retrieved successfully", data=progress)


@router.get("/{course_id}/reviews", response_model=APIResponse[List[Review]])
def get_course_reviews(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    reviews = review_service.get_course_reviews(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course reviews retrieved successfully", data=reviews)


@router.get("/{course_id}/reviews/statistics", response_model=APIResponse[ReviewStatistics])
def get_course_review_statistics(
    course_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    stats = review_service.get_course_statistics(db, course_id=course_id, current_user_context=context)
    return APIResponse(message="Course review statistics retrieved successfully", data=stats)
