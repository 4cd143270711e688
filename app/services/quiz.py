import logging
import uuid
from typing import Dict, List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.constants import LessonItemTypeEnum, QUIZ_PASSING_SCORE
from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.quiz_submission import quiz_submission as crud_quiz_submission
from app.models.lesson_item import LessonItem as LessonItemModel
from app.models.quiz_submission import QuizSubmission as QuizSubmissionModel
from app.schemas.quiz import QuizAnswer, QuizContent, QuizResult, SubmitQuizRequest
from app.services.lesson_item_progress import lesson_item_progress_service
from app.services.quiz_evaluator import build_answer_key, evaluate_answers

logger = logging.getLogger(__name__)

SUBMISSION_FIELDS = ["answers", "score", "total_questions", "correct_answers", "is_completed"]


class QuizService:

    def _load_quiz(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext):
        item = lesson_item_progress_service.get_lesson_item_or_raise(db, lesson_item_id, current_user_context)
        if item.type != LessonItemTypeEnum.QUESTION:
            raise ValidationFailedError("This lesson item is not a quiz.")
        try:
            content = QuizContent.model_validate(item.content or {})
        except ValidationError:
            logger.error(f"Stored quiz content of lesson item {item.id} is malformed")
            raise
        return item, content

    def _build_result(self, submission: QuizSubmissionModel, content: QuizContent, answers: List[QuizAnswer]) -> QuizResult:
        evaluation = evaluate_answers(build_answer_key(content), answers)
        explanations: Dict[str, str] = {q.id: q.explanation for q in content.questions if q.explanation}
        results = [
            r if r.is_correct else r.model_copy(update={"explanation": explanations.get(r.question_id)})
            for r in evaluation.questions
        ]
        return QuizResult(
            submission_id=submission.id,
            lesson_item_id=submission.lesson_item_id,
            results=results,
            score=submission.score,
            correct_answers=submission.correct_answers,
            total_questions=submission.total_questions,
            is_completed=submission.is_completed,
        )

    def _stage_submission(
        self, db: Session, item: LessonItemModel, content: QuizContent, request: SubmitQuizRequest, current_user_context: TenantContext
    ) -> QuizSubmissionModel:
        # Only enrolled users can submit; raises NotFound otherwise.
        lesson_item_progress_service.get_enrollment_or_raise(db, item.course_id, current_user_context)

        answer_key = build_answer_key(content)
        evaluation = evaluate_answers(answer_key, request.answers)
        all_answered = all(r.selected_option_id is not None for r in evaluation.questions)
        is_completed = bool(answer_key) and all_answered and evaluation.total_percentage >= QUIZ_PASSING_SCORE

        values = {
            "answers": [a.model_dump(by_alias=True) for a in request.answers],
            "score": evaluation.total_percentage,
            "total_questions": evaluation.total_questions,
            "correct_answers": evaluation.correct_count,
            "is_completed": is_completed,
        }

        submission = crud_quiz_submission.get_by_user_and_item(
            db, current_user_context.user_id, item.id, context=current_user_context, include_deleted=True
        )
        if submission is None:
            submission = crud_quiz_submission.add(db, context=current_user_context, obj_in={
                "user_id": current_user_context.user_id,
                "lesson_item_id": item.id,
                **values,
            })
        else:
            crud_quiz_submission.update(db, context=current_user_context, db_obj=submission, obj_in=values, fields=SUBMISSION_FIELDS)
            if submission.is_deleted:
                crud_quiz_submission.restore(db, context=current_user_context, db_obj=submission)

        if is_completed:
            lesson_item_progress_service.stage_completion(db, item, current_user_context)
        return submission

    def submit_quiz(self, db: Session, lesson_item_id: uuid.UUID, request: SubmitQuizRequest, current_user_context: TenantContext) -> QuizResult:
        for attempt in (1, 2):
            item, content = self._load_quiz(db, lesson_item_id, current_user_context)
            try:
                submission = self._stage_submission(db, item, content, request, current_user_context)
                crud_quiz_submission.save_changes(db)
                break
            except ConflictError:
                if attempt == 2:
                    raise
                logger.info(f"Quiz submission for item {lesson_item_id} raced another writer, retrying")

        db.refresh(submission)
        logger.info(
            f"User {current_user_context.user_id} scored {submission.score}% on quiz {lesson_item_id}"
        )
        return self._build_result(submission, content, request.answers)

    def get_user_quiz_result(self, db: Session, lesson_item_id: uuid.UUID, current_user_context: TenantContext) -> QuizResult:
        item, content = self._load_quiz(db, lesson_item_id, current_user_context)
        submission = crud_quiz_submission.get_by_user_and_item(
            db, current_user_context.user_id, item.id, context=current_user_context
        )
        if not submission:
            raise NotFoundError("No submission found for this quiz.")
        answers = [QuizAnswer.model_validate(a) for a in submission.answers or []]
        return self._build_result(submission, content, answers)


quiz_service = QuizService()
