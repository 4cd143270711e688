import uuid
from typing import Optional
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.lesson_item import LessonItem, LessonItemUpdate
from app.schemas.progress import LessonItemProgress, MarkCompleteRequest
from app.schemas.quiz import QuizResult, SubmitQuizRequest
from app.schemas.response import APIResponse
from app.services.lesson_item import lesson_item_service
from app.services.quiz import quiz_service
from app.utils import deps

router = APIRouter()


@router.get("/{lesson_item_id}", response_model=APIResponse[LessonItem])
def read_lesson_item(
    lesson_item_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    item = lesson_item_service.get_lesson_item(db, lesson_item_id=lesson_item_id, current_user_context=context)
    return APIResponse(message="Lesson item retrieved successfully", data=item)


@router.put("/{lesson_item_id}", response_model=APIResponse[LessonItem])
def update_lesson_item(
    *,
    db: Session = Depends(deps.get_db),
    lesson_item_id: uuid.UUID,
    item_in: LessonItemUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    item = lesson_item_service.update_lesson_item(db, lesson_item_id=lesson_item_id, item_in=item_in, current_user_context=context)
    return APIResponse(message="Lesson item updated successfully", data=item)


@router.delete("/{lesson_item_id}", response_model=APIResponse[LessonItem])
def delete_lesson_item(
    lesson_item_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    item = lesson_item_service.delete_lesson_item(db, lesson_item_id=lesson_item_id, current_user_context=context)
    return APIResponse(message="Lesson item deleted successfully", data=item)


@router.post("/{lesson_item_id}/complete", response_model=APIResponse[LessonItemProgress])
def complete_lesson_item(
    *,
    db: Session = Depends(deps.get_db),
    lesson_item_id: uuid.UUID,
    request: Optional[MarkCompleteRequest] = Body(None),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    duration = request.completed_duration_in_seconds if request else None
    progress = lesson_item_service.mark_complete(
        db, lesson_item_id=lesson_item_id, current_user_context=context, completed_duration_in_seconds=duration
    )
    return APIResponse(message="Lesson item marked as completed", data=progress)


@router.post("/{lesson_item_id}/quiz/submit", response_model=APIResponse[QuizResult])
def submit_quiz(
    *,
    db: Session = Depends(deps.get_db),
    lesson_item_id: uuid.UUID,
    submission_in: SubmitQuizRequest,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    result = quiz_service.submit_quiz(db, lesson_item_id=lesson_item_id, request=submission_in, current_user_context=context)
    return APIResponse(message="Quiz submitted successfully", data=result)


@router.get("/{lesson_item_id}/quiz/result", response_model=APIResponse[QuizResult])
def get_quiz_result(
    lesson_item_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    result = quiz_service.get_user_quiz_result(db, lesson_item_id=lesson_item_id, current_user_context=context)
    return APIResponse(message="Quiz result retrieved successfully", data=result)
