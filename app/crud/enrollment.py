import uuid
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.enrollment import Enrollment
from app.schemas.enrollment import EnrollmentCreate


class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentCreate]):

    def get_by_user_and_course(
        self, db: Session, user_id: uuid.UUID, course_id: uuid.UUID, *, context: TenantContext, include_deleted: bool = False
    ) -> Optional[Enrollment]:
        return self.find_one(
            db, Enrollment.user_id == user_id, Enrollment.course_id == course_id,
            context=context, include_deleted=include_deleted,
        )

    def get_by_user(self, db: Session, user_id: uuid.UUID, *, context: TenantContext) -> List[Enrollment]:
        return (
            self._query(db, context=context)
            .options(selectinload(Enrollment.course))
            .filter(Enrollment.user_id == user_id)
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    def get_by_user_and_courses(
        self, db: Session, user_id: uuid.UUID, course_ids: Iterable[uuid.UUID], *, context: TenantContext
    ) -> List[Enrollment]:
        ids = list(course_ids)
        if not ids:
            return []
        return self.find(db, Enrollment.user_id == user_id, Enrollment.course_id.in_(ids), context=context)


enrollment = CRUDEnrollment(Enrollment)
