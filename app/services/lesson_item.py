import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.constants import LessonItemTypeEnum
from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.lesson import lesson as crud_lesson
from app.crud.lesson_item import lesson_item as crud_lesson_item
from app.models.lesson_item import LessonItem as LessonItemModel
from app.schemas.lesson_item import LessonItemCreate, LessonItemUpdate, LessonItem
from app.schemas.progress import LessonItemProgress
from app.schemas.quiz import QuizContent, TextContent, VideoContent
from app.services.lesson_item_progress import lesson_item_progress_service
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)

CONTENT_SCHEMAS = {
    LessonItemTypeEnum.VIDEO: VideoContent,
    LessonItemTypeEnum.TEXT: TextContent,
    LessonItemTypeEnum.QUESTION: QuizContent,
}

# Keys a student must not see in question content.
ANSWER_KEYS = ("correctAnswerId", "explanation")


def validate_content(item_type: LessonItemTypeEnum, content: Dict[str, Any]) -> Dict[str, Any]:
    """Check ``content`` against the shape required by ``item_type`` and return it normalised."""
    schema = CONTENT_SCHEMAS[LessonItemTypeEnum(item_type)]
    try:
        parsed = schema.model_validate(content or {})
    except ValidationError as e:
        raise ValidationFailedError(
            f"Invalid content for a {LessonItemTypeEnum(item_type).value} item.",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        )

    if isinstance(parsed, QuizContent):
        seen = set()
        for question in parsed.questions:
            if question.id in seen:
                raise ValidationFailedError(f"Duplicate question id '{question.id}'.")
            seen.add(question.id)
            if question.correct_answer_id not in {option.id for option in question.options}:
                raise ValidationFailedError(f"Question '{question.id}' has no option matching its correct answer.")

    return parsed.model_dump(by_alias=True, exclude_none=True)


def sanitize_question_content(content: Dict[str, Any]) -> Dict[str, Any]:
    questions = [
        {key: value for key, value in question.items() if key not in ANSWER_KEYS}
        for question in content.get("questions", [])
    ]
    return {**content, "questions": questions}


class LessonItemService:

    def _get_or_raise(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext) -> LessonItemModel:
        item = crud_lesson_item.get(db, lesson_item_id, context=current_user_context)
        if not item:
            raise NotFoundError("Lesson item not found.")
        return item

    def to_schema(self, item: LessonItemModel, current_user_context: TenantContext) -> LessonItem:
        schema = LessonItem.model_validate(item)
        if item.type == LessonItemTypeEnum.QUESTION and permission_helper.is_student(current_user_context):
            schema = schema.model_copy(update={"content": sanitize_question_content(schema.content)})
        return schema

    def create_lesson_item(
        self, db: Session, lesson_id: uuid.UUID, item_in: LessonItemCreate, current_user_context: TenantContext
    ) -> LessonItem:
        permission_helper.require_content_author(current_user_context, "Students cannot create lesson items.")

        lesson = crud_lesson.get(db, lesson_id, context=current_user_context)
        if not lesson:
            raise NotFoundError("Lesson not found.")

        item_data = item_in.model_dump()
        item_data["content"] = validate_content(item_in.type, item_in.content)
        item_data["lesson_id"] = lesson.id
        item_data["course_id"] = lesson.course_id

        new_item = crud_lesson_item.add(db, context=current_user_context, obj_in=item_data)
        crud_lesson_item.save_changes(db)
        db.refresh(new_item)
        logger.info(f"Lesson item {new_item.id} ({new_item.type.value}) added to lesson {lesson.id}")
        return self.to_schema(new_item, current_user_context)

    def get_lesson_item(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext) -> LessonItem:
        return self.to_schema(self._get_or_raise(db, lesson_item_id, current_user_context), current_user_context)

    def get_course_items(self, db: Session, course_id: uuid.UUID, current_user_context: TenantContext) -> List[LessonItem]:
        items = crud_lesson_item.get_by_course(db, course_id, context=current_user_context)
        return [self.to_schema(item, current_user_context) for item in items]

    def update_lesson_item(
        self, db: Session, lesson_item_id: uuid.UUID, item_in: LessonItemUpdate, current_user_context: TenantContext
    ) -> LessonItem:
        permission_helper.require_content_author(current_user_context, "Students cannot update lesson items.")
        item = self._get_or_raise(db, lesson_item_id, current_user_context)

        item_data = item_in.model_dump(exclude_unset=True)
        if item_data.get("content") is not None:
            item_data["content"] = validate_content(item.type, item_data["content"])
        else:
            item_data.pop("content", None)

        crud_lesson_item.update(db, context=current_user_context, db_obj=item, obj_in=item_data)
        crud_lesson_item.save_changes(db)
        db.refresh(item)
        return self.to_schema(item, current_user_context)

    def delete_lesson_item(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext) -> LessonItem:
        permission_helper.require_content_author(current_user_context, "Students cannot delete lesson items.")
        item = self._get_or_raise(db, lesson_item_id, current_user_context)
        crud_lesson_item.remove(db, context=current_user_context, db_obj=item)
        crud_lesson_item.save_changes(db)
        return self.to_schema(item, current_user_context)

    def mark_complete(
        self,
        db: Session,
        lesson_item_id: uuid.UUID,
        current_user_context: TenantContext,
        completed_duration_in_seconds: Optional[float] = None,
    ) -> LessonItemProgress:
        return lesson_item_progress_service.mark_item_completed(
            db, lesson_item_id, current_user_context, completed_duration_in_seconds
        )


lesson_item_service = LessonItemService()
