import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.response import APIResponse, PaginatedResponse
from app.schemas.review import Review, ReviewCreate
from app.services.review import review_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Review], status_code=status.HTTP_201_CREATED)
def create_review(
    *,
    db: Session = Depends(deps.get_db),
    review_in: ReviewCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    review = review_service.create_review(db, review_in=review_in, current_user_context=context)
    return APIResponse(message="Review submitted successfully", data=review)


@router.get("/", response_model=APIResponse[PaginatedResponse[Review]])
def get_reviews(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context),
    course_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100)
):
    reviews = review_service.get_reviews(
        db, current_user_context=context, course_id=course_id, user_id=user_id, rating=rating, page=page, size=size
    )
    return APIResponse(message="Reviews retrieved successfully", data=reviews)


@router.delete("/{review_id}", response_model=APIResponse[Review])
def delete_review(
    review_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    review = review_service.delete_review(db, review_id=review_id, current_user_context=context)
    return APIResponse(message="Review deleted successfully", data=review)
