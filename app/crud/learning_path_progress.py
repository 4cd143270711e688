import uuid
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.learning_path_progress import LearningPathProgress
from app.schemas.learning_path import LearningPathEnrollment


class CRUDLearningPathProgress(CRUDBase[LearningPathProgress, LearningPathEnrollment, LearningPathEnrollment]):

    def get_by_user_and_learning_path(
        self, db: Session, user_id: uuid.UUID, learning_path_id: uuid.UUID, *, context: TenantContext, include_deleted: bool = False
    ) -> Optional[LearningPathProgress]:
        return self.find_one(
            db, LearningPathProgress.user_id == user_id, LearningPathProgress.learning_path_id == learning_path_id,
            context=context, include_deleted=include_deleted,
        )

    def get_by_user(self, db: Session, user_id: uuid.UUID, *, context: TenantContext) -> List[LearningPathProgress]:
        return (
            self._query(db, context=context)
            .options(selectinload(LearningPathProgress.learning_path))
            .filter(LearningPathProgress.user_id == user_id)
            .order_by(LearningPathProgress.enrolled_at.desc())
            .all()
        )

    def count_by_learning_path(
        self, db: Session, learning_path_ids: List[uuid.UUID], *, context: TenantContext
    ) -> Dict[uuid.UUID, int]:
        if not learning_path_ids:
            return {}
        rows = (
            self._query(db, context=context)
            .filter(LearningPathProgress.learning_path_id.in_(learning_path_ids))
            .with_entities(LearningPathProgress.learning_path_id, func.count(LearningPathProgress.id))
            .group_by(LearningPathProgress.learning_path_id)
            .all()
        )
        return {path_id: count for path_id, count in rows}


learning_path_progress = CRUDLearningPathProgress(LearningPathProgress)
