import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.course import Course


class EnrollmentCreate(BaseModel):
    course_id: uuid.UUID

class LastLessonItemUpdate(BaseModel):
    lesson_item_id: uuid.UUID

class Enrollment(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    enrolled_at: datetime
    is_favourite: bool = False
    last_lesson_item_id: Optional[uuid.UUID] = None
    completed_duration_in_seconds: float = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class EnrollmentWithCourse(Enrollment):
    course: Course
