import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from app.core.constants import UserRoleEnum


class UserBase(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    role: UserRoleEnum = UserRoleEnum.STUDENT
    is_active: bool = True

class UserCreate(UserBase):
    # Only honoured for system admins; everyone else creates users in their own organization.
    organization_id: Optional[uuid.UUID] = None

class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRoleEnum] = None
    is_active: Optional[bool] = None

class User(UserBase):
    id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    full_name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
