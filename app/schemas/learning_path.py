import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LearningPathCourseCreate(BaseModel):
    course_id: uuid.UUID
    order: int = Field(default=0, ge=0)
    is_required: bool = True

class LearningPathCourseUpdate(BaseModel):
    order: Optional[int] = Field(default=None, ge=0)
    is_required: Optional[bool] = None

class LearningPathCourse(BaseModel):
    id: uuid.UUID
    learning_path_id: uuid.UUID
    section_id: uuid.UUID
    course_id: uuid.UUID
    order: int
    is_required: bool

    model_config = ConfigDict(from_attributes=True)


class LearningPathSectionCreate(BaseModel):
    name: str
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=0)
    courses: List[LearningPathCourseCreate] = Field(default_factory=list)

class LearningPathSectionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = Field(default=None, ge=0)

class LearningPathSection(BaseModel):
    id: uuid.UUID
    learning_path_id: uuid.UUID
    name: str
    description: Optional[str] = None
    order: int

    model_config = ConfigDict(from_attributes=True)


class LearningPathBase(BaseModel):
    name: str
    description: Optional[str] = None
    photo: Optional[str] = None

class LearningPathCreate(LearningPathBase):
    sections: List[LearningPathSectionCreate] = Field(default_factory=list)

class LearningPathUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None

class LearningPath(LearningPathBase):
    id: uuid.UUID
    organization_id: Optional[uuid.UUID] = None
    created_by_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class LearningPathSummary(LearningPath):
    total_enrolled: int = 0
    duration_in_seconds: float = 0
    total_sections: int = 0
    total_courses: int = 0
    is_enrolled: bool = False


class LearningPathCourseDetails(BaseModel):
    id: uuid.UUID
    order: int
    is_required: bool
    course_id: uuid.UUID
    course_name: str
    course_description: Optional[str] = None
    course_photo: Optional[str] = None
    course_duration_in_seconds: float = 0

class LearningPathSectionDetails(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    order: int
    courses: List[LearningPathCourseDetails] = Field(default_factory=list)

class LearningPathDetails(LearningPathSummary):
    sections: List[LearningPathSectionDetails] = Field(default_factory=list)


class LearningPathCourseProgress(LearningPathCourseDetails):
    is_enrolled: bool = False
    is_completed: bool = False
    is_current_course: bool = False

class LearningPathSectionProgress(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    order: int
    is_current_section: bool = False
    courses: List[LearningPathCourseProgress] = Field(default_factory=list)

class LearningPathEnrollment(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    learning_path_id: uuid.UUID
    enrolled_at: datetime
    current_section_id: Optional[uuid.UUID] = None
    current_course_id: Optional[uuid.UUID] = None
    completed_duration_in_seconds: float = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LearningPathEnrollmentStatus(BaseModel):
    is_enrolled: bool
    enrolled_at: Optional[datetime] = None

class LearningPathProgress(LearningPathEnrollment):
    name: str
    description: Optional[str] = None
    photo: Optional[str] = None
    duration_in_seconds: float = 0
    percentage: int = Field(default=0, ge=0, le=100)
    sections: List[LearningPathSectionProgress] = Field(default_factory=list)
