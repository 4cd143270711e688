import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CourseBase(BaseModel):
    name: str
    description: Optional[str] = None
    photo: Optional[str] = None
    category_id: Optional[uuid.UUID] = None

class CourseCreate(CourseBase):
    pass

class CourseUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None

class Course(CourseBase):
    id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    created_by_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CourseProgress(BaseModel):
    course_id: uuid.UUID
    completed_items: int = 0
    total_items: int = 0
    percentage: int = Field(default=0, ge=0, le=100)
