import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MarkCompleteRequest(BaseModel):
    # Falls back to the item's own duration when omitted.
    completed_duration_in_seconds: Optional[float] = Field(default=None, ge=0)

class LessonItemProgress(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    lesson_item_id: uuid.UUID
    lesson_id: uuid.UUID
    course_id: uuid.UUID
    is_completed: bool
    completed_at: Optional[datetime] = None
    completed_duration_in_seconds: float = 0

    model_config = ConfigDict(from_attributes=True)
