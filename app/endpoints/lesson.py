import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.lesson import Lesson, LessonCreate, LessonUpdate
from app.schemas.lesson_item import LessonItem, LessonItemCreate, LessonItemWithProgress
from app.schemas.response import APIResponse
from app.services.lesson import lesson_service
from app.services.lesson_item import lesson_item_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Lesson], status_code=status.HTTP_201_CREATED)
def create_lesson(
    *,
    db: Session = Depends(deps.get_db),
    lesson_in: LessonCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    lesson = lesson_service.create_lesson(db, lesson_in=lesson_in, current_user_context=context)
    return APIResponse(message="Lesson created successfully", data=lesson)


@router.get("/{lesson_id}", response_model=APIResponse[Lesson])
def read_lesson(
    lesson_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    lesson = lesson_service.get_lesson(db, lesson_id=lesson_id, current_user_context=context)
    return APIResponse(message="Lesson retrieved successfully", data=lesson)


@router.put("/{lesson_id}", response_model=APIResponse[Lesson])
def update_lesson(
    *,
    db: Session = Depends(deps.get_db),
    lesson_id: uuid.UUID,
    lesson_in: LessonUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    lesson = lesson_service.update_lesson(db, lesson_id=lesson_id, lesson_in=lesson_in, current_user_context=context)
    return APIResponse(message="Lesson updated successfully", data=lesson)


@router.delete("/{lesson_id}", response_model=APIResponse[Lesson])
def delete_lesson(
    lesson_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    lesson = lesson_service.delete_lesson(db, lesson_id=lesson_id, current_user_context=context)
    return APIResponse(message="Lesson deleted successfully", data=lesson)


@router.post("/{lesson_id}/items", response_model=APIResponse[LessonItem], status_code=status.HTTP_201_CREATED)
def create_lesson_item(
    *,
    db: Session = Depends(deps.get_db),
    lesson_id: uuid.UUID,
    item_in: LessonItemCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    item = lesson_item_service.create_lesson_item(db, lesson_id=lesson_id, item_in=item_in, current_user_context=context)
    return APIResponse(message="Lesson item created successfully", data=item)


@router.get("/{lesson_id}/items", response_model=APIResponse[List[LessonItem]])
def get_lesson_items(
    lesson_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    items = lesson_service.get_lesson_items(db, lesson_id=lesson_id, current_user_context=context)
    return APIResponse(message="Lesson items retrieved successfully", data=items)


@router.get("/{lesson_id}/items/progress", response_model=APIResponse[List[LessonItemWithProgress]])
def get_lesson_items_with_progress(
    lesson_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    items = lesson_service.get_lesson_items_with_progress(db, lesson_id=lesson_id, current_user_context=context)
    return APIResponse(message="Lesson items with progress retrieved successfully", data=items)
