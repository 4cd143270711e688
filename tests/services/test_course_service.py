import uuid

import pytest

from app.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationFailedError
from app.schemas.course import CourseCreate, CourseUpdate
from app.schemas.lesson import LessonCreate, LessonUpdate
from app.schemas.lesson_item import LessonItemCreate
from app.services.course import course_service
from app.services.enrollment import enrollment_service
from app.services.lesson import lesson_service
from app.services.lesson_item import lesson_item_service
from tests.helpers.auth import context_for
from tests.helpers.content import build_course


def test_students_cannot_author_courses(db_session, student_a):
    with pytest.raises(AccessDeniedError):
        course_service.create_course(db_session, CourseCreate(name="Mine"), context_for(student_a))


def test_create_records_the_author_and_organization(db_session, instructor_a, org_a):
    course = course_service.create_course(db_session, CourseCreate(name="Physics"), context_for(instructor_a))
    assert course.created_by_id == instructor_a.id
    assert course.organization_id == org_a.id


def test_unknown_category_is_not_found(db_session, instructor_a):
    with pytest.raises(NotFoundError):
        course_service.create_course(db_session, CourseCreate(name="X", category_id=uuid.uuid4()), context_for(instructor_a))


def test_update_copies_only_non_empty_values(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = course_service.create_course(db_session, CourseCreate(name="Old", description="Keep me", photo="old.png"), ctx)

    updated = course_service.update_course(db_session, course.id, CourseUpdate(name="New", description="   ", photo=None), ctx)

    assert updated.name == "New"
    assert updated.description == "Keep me"
    assert updated.photo == "old.png"
    assert updated.updated_at >= course.updated_at


def test_get_courses_rejects_unknown_ordering(db_session, instructor_a):
    with pytest.raises(ValidationFailedError):
        course_service.get_courses(db_session, context_for(instructor_a), order_by="secret_column")


def test_deleted_course_can_be_restored(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = course_service.create_course(db_session, CourseCreate(name="Temp"), ctx)

    course_service.delete_course(db_session, course.id, ctx)
    with pytest.raises(NotFoundError):
        course_service.get_course(db_session, course.id, ctx)

    course_service.restore_course(db_session, course.id, ctx)
    assert course_service.get_course(db_session, course.id, ctx).name == "Temp"


def test_lessons_get_the_next_free_order(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = course_service.create_course(db_session, CourseCreate(name="Ordered"), ctx)

    first = lesson_service.create_lesson(db_session, LessonCreate(title="One", course_id=course.id), ctx)
    second = lesson_service.create_lesson(db_session, LessonCreate(title="Two", course_id=course.id), ctx)
    lesson_service.delete_lesson(db_session, second.id, ctx)
    third = lesson_service.create_lesson(db_session, LessonCreate(title="Three", course_id=course.id), ctx)

    assert (first.order, second.order, third.order) == (0, 1, 2)
    assert [l.title for l in course_service.get_course_lessons(db_session, course.id, ctx)] == ["One", "Three"]


def test_duplicate_lesson_order_is_a_conflict(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = course_service.create_course(db_session, CourseCreate(name="Ordered"), ctx)
    lesson_service.create_lesson(db_session, LessonCreate(title="One", course_id=course.id, order=3), ctx)

    with pytest.raises(ConflictError):
        lesson_service.create_lesson(db_session, LessonCreate(title="Clash", course_id=course.id, order=3), ctx)


def test_lesson_update_is_partial(db_session, instructor_a):
    ctx = context_for(instructor_a)
    _, lesson, _ = build_course(db_session, instructor_a, item_defs=[])

    updated = lesson_service.update_lesson(db_session, lesson.id, LessonUpdate(description="Now described"), ctx)
    assert updated.title == "Lesson 1"
    assert updated.description == "Now described"


def test_lesson_items_are_stamped_with_their_lesson_and_course(db_session, instructor_a):
    course, lesson, (video, quiz) = build_course(db_session, instructor_a)

    assert video.lesson_id == lesson.id
    assert video.course_id == course.id
    assert quiz.course_id == course.id


def test_question_content_must_match_its_options(db_session, instructor_a):
    _, lesson, _ = build_course(db_session, instructor_a, item_defs=[])
    bad_quiz = {
        "questions": [{
            "id": "q1",
            "questionText": "?",
            "options": [{"id": "a", "text": "A"}, {"id": "b", "text": "B"}],
            "correctAnswerId": "z",
        }]
    }

    with pytest.raises(ValidationFailedError):
        lesson_item_service.create_lesson_item(
            db_session, lesson.id, LessonItemCreate(name="Bad", type="question", content=bad_quiz), context_for(instructor_a)
        )
    with pytest.raises(ValidationFailedError):
        lesson_item_service.create_lesson_item(
            db_session, lesson.id, LessonItemCreate(name="Bad video", type="video", content={}), context_for(instructor_a)
        )


def test_students_never_see_answers(db_session, instructor_a, student_a):
    _, lesson, (_, quiz) = build_course(db_session, instructor_a)

    as_student = lesson_item_service.get_lesson_item(db_session, quiz.id, context_for(student_a))
    for question in as_student.content["questions"]:
        assert "correctAnswerId" not in question
        assert "explanation" not in question
        assert question["options"]

    as_author = lesson_item_service.get_lesson_item(db_session, quiz.id, context_for(instructor_a))
    assert as_author.content["questions"][0]["correctAnswerId"] == "a"


def test_lesson_items_with_progress_flags(db_session, instructor_a, student_a):
    course, lesson, (video, quiz) = build_course(db_session, instructor_a)
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, course.id, ctx)
    lesson_item_service.mark_complete(db_session, video.id, ctx)

    items = lesson_service.get_lesson_items_with_progress(db_session, lesson.id, ctx)
    assert [(i.id, i.is_completed) for i in items] == [(video.id, True), (quiz.id, False)]
