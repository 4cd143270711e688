import uuid

import pytest

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.enrollment import Enrollment
from app.services.course import course_service
from app.services.enrollment import enrollment_service
from tests.helpers.auth import context_for
from tests.helpers.content import build_course


def test_enrolling_twice_is_a_conflict(db_session, instructor_a, student_a):
    course, _, _ = build_course(db_session, instructor_a)
    ctx = context_for(student_a)

    enrollment = enrollment_service.enroll(db_session, course.id, ctx)
    assert enrollment.user_id == student_a.id
    assert enrollment.is_completed is False

    with pytest.raises(ConflictError):
        enrollment_service.enroll(db_session, course.id, ctx)
    assert db_session.query(Enrollment).filter(Enrollment.course_id == course.id).count() == 1


def test_cannot_enroll_in_another_organizations_course(db_session, instructor_a, student_b):
    course, _, _ = build_course(db_session, instructor_a)
    with pytest.raises(NotFoundError):
        enrollment_service.enroll(db_session, course.id, context_for(student_b))


def test_reenrolling_restores_the_soft_deleted_enrollment(db_session, instructor_a, student_a):
    course, _, _ = build_course(db_session, instructor_a)
    ctx = context_for(student_a)
    first = enrollment_service.enroll(db_session, course.id, ctx)

    enrollment_service.unenroll(db_session, course.id, ctx)
    with pytest.raises(NotFoundError):
        enrollment_service.get_enrollment(db_session, course.id, ctx)

    again = enrollment_service.enroll(db_session, course.id, ctx)
    assert again.id == first.id
    assert db_session.query(Enrollment).count() == 1


def test_toggle_favourite(db_session, instructor_a, student_a):
    course, _, _ = build_course(db_session, instructor_a)
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, course.id, ctx)

    assert enrollment_service.toggle_favourite(db_session, course.id, ctx).is_favourite is True
    assert enrollment_service.toggle_favourite(db_session, course.id, ctx).is_favourite is False


def test_last_lesson_item_must_belong_to_the_course(db_session, instructor_a, student_a):
    course, _, items = build_course(db_session, instructor_a, "First")
    _, _, other_items = build_course(db_session, instructor_a, "Second")
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, course.id, ctx)

    updated = enrollment_service.set_last_lesson_item(db_session, course.id, items[1].id, ctx)
    assert updated.last_lesson_item_id == items[1].id

    with pytest.raises(ValidationFailedError):
        enrollment_service.set_last_lesson_item(db_session, course.id, other_items[0].id, ctx)
    with pytest.raises(NotFoundError):
        enrollment_service.set_last_lesson_item(db_session, course.id, uuid.uuid4(), ctx)


def test_my_enrollments_hide_deleted_courses(db_session, instructor_a, student_a):
    kept, _, _ = build_course(db_session, instructor_a, "Kept")
    dropped, _, _ = build_course(db_session, instructor_a, "Dropped")
    ctx = context_for(student_a)
    enrollment_service.enroll(db_session, kept.id, ctx)
    enrollment_service.enroll(db_session, dropped.id, ctx)

    course_service.delete_course(db_session, dropped.id, context_for(instructor_a))

    mine = enrollment_service.get_my_enrollments(db_session, ctx)
    assert [e.course.name for e in mine] == ["Kept"]
