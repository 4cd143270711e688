import pytest

from app.core.exceptions import AccessDeniedError, ConflictError
from app.schemas.review import ReviewCreate
from app.services.enrollment import enrollment_service
from app.services.review import review_service
from tests.helpers.auth import context_for
from tests.helpers.content import build_course


@pytest.fixture
def reviewed_course(db_session, instructor_a, user_factory, org_a):
    course, _, _ = build_course(db_session, instructor_a, item_defs=[])
    students = [user_factory(org_a) for _ in range(3)]
    for student, rating in zip(students, (5, 5, 2)):
        ctx = context_for(student)
        enrollment_service.enroll(db_session, course.id, ctx)
        review_service.create_review(db_session, ReviewCreate(course_id=course.id, rating=rating), ctx)
    return course, students


def test_only_enrolled_users_can_review(db_session, instructor_a, student_a):
    course, _, _ = build_course(db_session, instructor_a, item_defs=[])
    with pytest.raises(AccessDeniedError):
        review_service.create_review(db_session, ReviewCreate(course_id=course.id, rating=4), context_for(student_a))


def test_second_review_is_a_conflict(db_session, reviewed_course):
    course, students = reviewed_course
    with pytest.raises(ConflictError):
        review_service.create_review(db_session, ReviewCreate(course_id=course.id, rating=1), context_for(students[0]))


def test_statistics(db_session, reviewed_course, instructor_a):
    course, _ = reviewed_course

    stats = review_service.get_course_statistics(db_session, course.id, context_for(instructor_a))

    assert stats.total_reviews == 3
    assert stats.average_rating == 4.0
    buckets = {b.stars: (b.count, b.percentage) for b in stats.buckets}
    assert buckets[5] == (2, 66.67)
    assert buckets[2] == (1, 33.33)
    assert buckets[1] == (0, 0.0)
    assert [b.stars for b in stats.buckets] == [5, 4, 3, 2, 1]


def test_admin_listing_is_paged_and_filtered(db_session, reviewed_course, org_admin_a, student_a):
    course, students = reviewed_course
    admin = context_for(org_admin_a)

    five_stars = review_service.get_reviews(db_session, admin, course_id=course.id, rating=5, page=1, size=1)
    assert five_stars.total == 2
    assert five_stars.pages == 2
    assert len(five_stars.items) == 1
    assert five_stars.items[0].rating == 5

    by_user = review_service.get_reviews(db_session, admin, user_id=students[2].id)
    assert [r.rating for r in by_user.items] == [2]

    with pytest.raises(AccessDeniedError):
        review_service.get_reviews(db_session, context_for(student_a))


def test_deleted_review_can_be_written_again(db_session, reviewed_course, org_admin_a):
    course, students = reviewed_course
    ctx = context_for(students[2])
    original = review_service.get_reviews(db_session, context_for(org_admin_a), user_id=students[2].id).items[0]

    review_service.delete_review(db_session, original.id, context_for(org_admin_a))
    assert len(review_service.get_course_reviews(db_session, course.id, ctx)) == 2

    rewritten = review_service.create_review(db_session, ReviewCreate(course_id=course.id, rating=4, comment="Better now"), ctx)
    assert rewritten.id == original.id
    assert rewritten.rating == 4
    assert review_service.get_course_statistics(db_session, course.id, ctx).average_rating == round(14 / 3, 2)


def test_students_cannot_delete_other_reviews(db_session, reviewed_course, org_admin_a):
    _, students = reviewed_course
    target = review_service.get_reviews(db_session, context_for(org_admin_a), user_id=students[0].id).items[0]
    with pytest.raises(AccessDeniedError):
        review_service.delete_review(db_session, target.id, context_for(students[1]))
