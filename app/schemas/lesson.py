import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LessonBase(BaseModel):
    title: str
    description: Optional[str] = None

class LessonCreate(LessonBase):
    course_id: uuid.UUID
    order: Optional[int] = Field(default=None, ge=0)

class LessonUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=0)

class Lesson(LessonBase):
    id: uuid.UUID
    course_id: uuid.UUID
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
