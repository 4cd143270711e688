import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.category import Category, CategoryCreate
from app.schemas.course import Course
from app.schemas.response import APIResponse
from app.services.category import category_service
from app.services.course import course_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Category], status_code=status.HTTP_201_CREATED)
def create_category(
    *,
    db: Session = Depends(deps.get_db),
    category_in: CategoryCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    category = category_service.create_category(db, category_in=category_in, current_user_context=context)
    return APIResponse(message="Category created successfully", data=category)


@router.get("/", response_model=APIResponse[List[Category]])
def get_categories(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    categories = category_service.get_categories(db, current_user_context=context)
    return APIResponse(message="Categories retrieved successfully", data=categories)


@router.get("/{category_id}", response_model=APIResponse[Category])
def read_category(
    category_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    category = category_service.get_category(db, category_id=category_id, current_user_context=context)
    return APIResponse(message="Category retrieved successfully", data=category)


@router.get("/{category_id}/courses", response_model=APIResponse[List[Course]])
def get_category_courses(
    category_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    courses = course_service.get_courses_by_category(db, category_id=category_id, current_user_context=context)
    return APIResponse(message="Courses for category retrieved successfully", data=courses)


@router.delete("/{category_id}", response_model=APIResponse[Category])
def delete_category(
    category_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    category = category_service.delete_category(db, category_id=category_id, current_user_context=context)
    return APIResponse(message="Category deleted successfully", data=category)
