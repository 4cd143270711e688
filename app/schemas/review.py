import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    course_id: uuid.UUID
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None

class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None

class Review(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    reviewed_at: datetime

    model_config = ConfigDict(from_attributes=True)

class RatingBucket(BaseModel):
    stars: int
    count: int
    percentage: float

class ReviewStatistics(BaseModel):
    course_id: uuid.UUID
    total_reviews: int
    average_rating: float
    buckets: List[RatingBucket]
