import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.review import Review
from app.schemas.review import ReviewCreate, ReviewUpdate


class CRUDReview(CRUDBase[Review, ReviewCreate, ReviewUpdate]):

    def get_by_user_and_course(
        self, db: Session, user_id: uuid.UUID, course_id: uuid.UUID, *, context: TenantContext, include_deleted: bool = False
    ) -> Optional[Review]:
        return self.find_one(
            db, Review.user_id == user_id, Review.course_id == course_id,
            context=context, include_deleted=include_deleted,
        )

    def get_by_course(self, db: Session, course_id: uuid.UUID, *, context: TenantContext) -> List[Review]:
        return self.find(db, Review.course_id == course_id, context=context, order_by=Review.reviewed_at, descending=True)


review = CRUDReview(Review)
