import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import LessonItemTypeEnum


class LessonItemBase(BaseModel):
    name: str
    description: Optional[str] = None
    type: LessonItemTypeEnum = LessonItemTypeEnum.TEXT
    content: Dict[str, Any] = Field(default_factory=dict)
    duration_in_seconds: int = Field(default=0, ge=0)
    order: int = Field(default=0, ge=0)

class LessonItemCreate(LessonItemBase):
    pass

class LessonItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    duration_in_seconds: Optional[int] = Field(default=None, ge=0)
    order: Optional[int] = Field(default=None, ge=0)

class LessonItem(LessonItemBase):
    id: uuid.UUID
    lesson_id: uuid.UUID
    course_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class LessonItemWithProgress(LessonItem):
    is_completed: bool = False
