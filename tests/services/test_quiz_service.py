import pytest

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.crud.quiz_submission import quiz_submission as crud_quiz_submission
from app.models.quiz_submission import QuizSubmission
from app.schemas.quiz import QuizAnswer, SubmitQuizRequest
from app.services.enrollment import enrollment_service
from app.services.lesson_item_progress import lesson_item_progress_service
from app.services.quiz import quiz_service
from tests.helpers.auth import context_for
from tests.helpers.content import build_course
from tests.helpers.races import lookup_misses_once


def _submit(*pairs):
    return SubmitQuizRequest(answers=[QuizAnswer(question_id=q, selected_option_id=o) for q, o in pairs])


@pytest.fixture
def enrolled_quiz(db_session, instructor_a, student_a):
    course, _, (_, quiz) = build_course(db_session, instructor_a)
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, course.id, ctx)
    return course, quiz, ctx


def test_partial_submission_scores_half_and_does_not_complete(db_session, enrolled_quiz):
    course, quiz, ctx = enrolled_quiz

    result = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "a")), ctx)

    assert result.score == 50
    assert result.correct_answers == 1
    assert result.total_questions == 2
    assert result.is_completed is False
    assert [(r.question_id, r.is_correct) for r in result.results] == [("q1", True), ("q2", False)]
    assert lesson_item_progress_service.completed_item_ids(db_session, [quiz.id], ctx) == set()


def test_incorrect_answers_carry_the_explanation(db_session, enrolled_quiz):
    _, quiz, ctx = enrolled_quiz

    result = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "b"), ("q2", "c")), ctx)

    q1 = result.results[0]
    assert q1.is_correct is False
    assert q1.explanation == "Basic addition."
    assert result.results[1].explanation is None


def test_perfect_score_completes_the_item(db_session, enrolled_quiz):
    course, quiz, ctx = enrolled_quiz

    result = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "a"), ("q2", "c")), ctx)

    assert result.score == 100
    assert result.is_completed is True
    assert lesson_item_progress_service.completed_item_ids(db_session, [quiz.id], ctx) == {quiz.id}
    assert enrollment_service.get_enrollment(db_session, course.id, ctx).last_lesson_item_id == quiz.id


def test_resubmission_overwrites_the_previous_result(db_session, enrolled_quiz):
    _, quiz, ctx = enrolled_quiz

    first = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "b")), ctx)
    second = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "a"), ("q2", "c")), ctx)

    assert first.submission_id == second.submission_id
    assert db_session.query(QuizSubmission).count() == 1

    stored = quiz_service.get_user_quiz_result(db_session, quiz.id, ctx)
    assert stored.score == 100
    assert [r.selected_option_id for r in stored.results] == ["a", "c"]


def test_quiz_result_before_submitting_is_not_found(db_session, enrolled_quiz):
    _, quiz, ctx = enrolled_quiz
    with pytest.raises(NotFoundError):
        quiz_service.get_user_quiz_result(db_session, quiz.id, ctx)


def test_only_question_items_accept_submissions(db_session, instructor_a, student_a):
    course, _, (video, _) = build_course(db_session, instructor_a)
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, course.id, ctx)

    with pytest.raises(ValidationFailedError):
        quiz_service.submit_quiz(db_session, video.id, _submit(("q1", "a")), ctx)


def test_submitting_requires_enrollment(db_session, instructor_a, student_a):
    _, _, (_, quiz) = build_course(db_session, instructor_a)
    with pytest.raises(NotFoundError):
        quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "a")), context_for(student_a))


def test_concurrent_submission_is_retried_as_an_overwrite(db_session, monkeypatch, enrolled_quiz):
    _, quiz, ctx = enrolled_quiz
    first = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "b")), ctx)

    lookups = lookup_misses_once(monkeypatch, crud_quiz_submission)
    retried = quiz_service.submit_quiz(db_session, quiz.id, _submit(("q1", "a"), ("q2", "c")), ctx)

    assert lookups["count"] == 2
    assert retried.submission_id == first.submission_id
    assert retried.score == 100
    assert retried.is_completed is True
    assert db_session.query(QuizSubmission).count() == 1
    assert lesson_item_progress_service.completed_item_ids(db_session, [quiz.id], ctx) == {quiz.id}
