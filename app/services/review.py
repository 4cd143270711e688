import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError
from app.core.tenant import TenantContext
from app.crud.course import course as crud_course
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.review import review as crud_review
from app.models.base import utcnow
from app.models.review import Review as ReviewModel
from app.schemas.response import PaginatedResponse
from app.schemas.review import RatingBucket, ReviewCreate, Review, ReviewStatistics
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ReviewService:

    def _require_course(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext):
        course = crud_course.get(db, course_id, context=current_user_context)
        if not course:
            raise NotFoundError("Course not found.")
        return course

    def create_review(self, db: Session, review_in: ReviewCreate, current_user_context: TenantContext) -> Review:
        course = self._require_course(db, review_in.course_id, current_user_context)

        if not crud_enrollment.get_by_user_and_course(db, current_user_context.user_id, course.id, context=current_user_context):
            raise AccessDeniedError("Only enrolled users can review this course.")

        existing = crud_review.get_by_user_and_course(
            db, current_user_context.user_id, course.id, context=current_user_context, include_deleted=True
        )
        if existing and not existing.is_deleted:
            raise ConflictError("You have already reviewed this course.")

        values = {"rating": review_in.rating, "comment": review_in.comment, "reviewed_at": utcnow()}
        if existing:
            crud_review.update(db, context=current_user_context, db_obj=existing, obj_in=values)
            review = crud_review.restore(db, context=current_user_context, db_obj=existing)
        else:
            review = crud_review.add(db, context=current_user_context, obj_in={
                "user_id": current_user_context.user_id,
                "course_id": course.id,
                **values,
            })

        crud_review.save_changes(db)
        db.refresh(review)
        return Review.model_validate(review)

    def get_course_reviews(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> List[Review]:
        self._require_course(db, course_id, current_user_context)
        return [Review.model_validate(r) for r in crud_review.get_by_course(db, course_id, context=current_user_context)]

    def get_course_statistics(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> ReviewStatistics:
        self._require_course(db, course_id, current_user_context)
        ratings = [r.rating for r in crud_review.get_by_course(db, course_id, context=current_user_context)]
        total = len(ratings)

        buckets = []
        for stars in range(5, 0, -1):
            count = ratings.count(stars)
            buckets.append(RatingBucket(
                stars=stars,
                count=count,
                percentage=round(count / total * 100, 2) if total else 0.0,
            ))

        return ReviewStatistics(
            course_id=course_id,
            total_reviews=total,
            average_rating=round(sum(ratings) / total, 2) if total else 0.0,
            buckets=buckets,
        )

    def get_reviews(
        self,
        db: Session,
        current_user_context: TenantContext,
        course_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        rating: Optional[int] = None,
        page: int = 1,
        size: int = 20,
    ) -> PaginatedResponse[Review]:
        permission_helper.require_admin(current_user_context, "Only administrators can browse all reviews.")

        criteria = []
        if course_id is not None:
            criteria.append(ReviewModel.course_id == course_id)
        if user_id is not None:
            criteria.append(ReviewModel.user_id == user_id)
        if rating is not None:
            criteria.append(ReviewModel.rating == rating)

        paged = crud_review.get_paged(
            db, *criteria, context=current_user_context, page=page, size=size, order_by=ReviewModel.reviewed_at
        )
        return PaginatedResponse[Review](
            **paged.model_dump(exclude={"items"}),
            items=[Review.model_validate(r) for r in paged.items],
        )

    def delete_review(self, db: Session, review_id: uuid.UUID, current_user_context: TenantContext) -> Review:
        review = crud_review.get(db, review_id, context=current_user_context)
        if not review:
            raise NotFoundError("Review not found.")
        if review.user_id != current_user_context.user_id and not permission_helper.is_admin(current_user_context):
            raise AccessDeniedError("You can only delete your own reviews.")

        crud_review.remove(db, context=current_user_context, db_obj=review)
        crud_review.save_changes(db)
        logger.info(f"Review {review.id} soft-deleted by {current_user_context.user_id}")
        return Review.model_validate(review)


review_service = ReviewService()
