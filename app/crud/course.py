import uuid
from typing import List

from sqlalchemy.orm import Session

from app.core.tenant import TenantContext
from app.crud.base import CRUDBase
from app.models.course import Course
from app.schemas.course import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def get_by_category(self, db: Session, category_id: uuid.UUID, *, context: TenantContext) -> List[Course]:
        return self.find(db, Course.category_id == category_id, context=context, order_by=Course.name)


course = CRUDCourse(Course)
