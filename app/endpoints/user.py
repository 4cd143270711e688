import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from pydantic import EmailStr
from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.schemas.response import APIResponse
from app.schemas.user import User, UserCreate, UserUpdate
from app.services.user import user_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UserCreate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.create_user(db, user_in=user_in, current_user_context=context)
    return APIResponse(message="User created successfully", data=user)


@router.get("/", response_model=APIResponse[List[User]])
def get_users(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    users = user_service.get_users(db, current_user_context=context)
    return APIResponse(message="Users retrieved successfully", data=users)


@router.get("/me", response_model=APIResponse[User])
def read_me(
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.get_me(db, current_user_context=context)
    return APIResponse(message="User retrieved successfully", data=user)


@router.get("/by-email", response_model=APIResponse[User])
def read_user_by_email(
    email: EmailStr,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.get_user_by_email(db, email=email, current_user_context=context)
    return APIResponse(message="User retrieved successfully", data=user)


@router.get("/{user_id}", response_model=APIResponse[User])
def read_user(
    user_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.get_user(db, user_id=user_id, current_user_context=context)
    return APIResponse(message="User retrieved successfully", data=user)


@router.put("/{user_id}", response_model=APIResponse[User])
def update_user(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID,
    user_in: UserUpdate,
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.update_user(db, user_id=user_id, user_in=user_in, current_user_context=context)
    return APIResponse(message="User updated successfully", data=user)


@router.delete("/{user_id}", response_model=APIResponse[User])
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    context: TenantContext = Depends(deps.get_tenant_context)
):
    user = user_service.delete_user(db, user_id=user_id, current_user_context=context)
    return APIResponse(message="User deleted successfully", data=user)
