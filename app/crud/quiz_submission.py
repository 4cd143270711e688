import uuid
from typing import Optional

from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.quiz_submission import QuizSubmission
from app.schemas.quiz import SubmitQuizRequest


class CRUDQuizSubmission(CRUDBase[QuizSubmission, SubmitQuizRequest, SubmitQuizRequest]):

    def get_by_user_and_item(
        self, db: Session, user_id: uuid.UUID, lesson_item_id: uuid.UUID, *, context: TenantContext, include_deleted: bool = False
    ) -> Optional[QuizSubmission]:
        return self.find_one(
            db, QuizSubmission.user_id == user_id, QuizSubmission.lesson_item_id == lesson_item_id,
            context=context, include_deleted=include_deleted,
        )


quiz_submission = CRUDQuizSubmission(QuizSubmission)
