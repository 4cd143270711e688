import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from app.core.constants import UserRoleEnum
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationFailedError
from app.core.tenant import TenantContext
from app.crud.course import course as crud_course
from app.crud.user import user as crud_user
from app.models.course import Course
from tests.helpers.auth import context_for


def _course(db: Session, context: TenantContext, name: str = "Course", **extra) -> Course:
    course = crud_course.add(db, context=context, obj_in={"name": name, **extra})
    crud_course.save_changes(db)
    return course


def test_add_stamps_organization_and_timestamps(db_session, instructor_a, org_a):
    course = _course(db_session, context_for(instructor_a), "Algebra")

    assert isinstance(course.id, uuid.UUID)
    assert course.organization_id == org_a.id
    assert course.created_at is not None
    assert course.updated_at is not None
    assert course.is_deleted is False


def test_add_rejects_another_organization(db_session, instructor_a, org_b):
    with pytest.raises(ValidationFailedError):
        crud_course.add(db_session, context=context_for(instructor_a), obj_in={"name": "X", "organization_id": org_b.id})


def test_system_admin_add_keeps_explicit_organization(db_session, system_admin, org_b):
    course = _course(db_session, context_for(system_admin), "Global", organization_id=org_b.id)
    assert course.organization_id == org_b.id


def test_get_out_of_scope_is_not_found(db_session, instructor_a, instructor_b):
    course = _course(db_session, context_for(instructor_a))

    assert crud_course.get(db_session, course.id, context=context_for(instructor_b)) is None
    assert crud_course.get(db_session, course.id, context=context_for(instructor_a)).id == course.id


def test_none_context_is_unauthorized(db_session, instructor_a):
    course = _course(db_session, context_for(instructor_a))
    with pytest.raises(UnauthorizedError):
        crud_course.get(db_session, course.id, context=None)
    with pytest.raises(UnauthorizedError):
        crud_course.add(db_session, context=None, obj_in={"name": "Nope"})


def test_context_without_organization_sees_only_unowned_rows(db_session, instructor_a, system_admin):
    _course(db_session, context_for(instructor_a), "Owned")
    _course(db_session, context_for(system_admin), "Unowned")
    orphan = TenantContext(user_id=uuid.uuid4(), organization_id=None, role=UserRoleEnum.INSTRUCTOR)

    names = [c.name for c in crud_course.get_all(db_session, context=orphan)]
    assert names == ["Unowned"]


def test_remove_soft_deletes_without_dropping_the_row(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = _course(db_session, ctx)
    rows_before = db_session.query(Course).count()

    crud_course.remove(db_session, context=ctx, db_obj=course)
    crud_course.save_changes(db_session)

    assert db_session.query(Course).count() == rows_before
    assert crud_course.get(db_session, course.id, context=ctx) is None
    assert crud_course.get_all(db_session, context=ctx) == []
    assert crud_course.find(db_session, Course.name == "Course", context=ctx) == []
    deleted = crud_course.get(db_session, course.id, context=ctx, include_deleted=True)
    assert deleted is not None
    assert deleted.is_deleted is True


def test_restore_brings_the_row_back(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = _course(db_session, ctx)
    crud_course.remove(db_session, context=ctx, db_obj=course)
    crud_course.save_changes(db_session)

    crud_course.restore(db_session, context=ctx, db_obj=course)
    crud_course.save_changes(db_session)

    assert [c.id for c in crud_course.get_all(db_session, context=ctx)] == [course.id]


def test_remove_out_of_scope_is_not_found(db_session, instructor_a, instructor_b):
    course = _course(db_session, context_for(instructor_a))
    with pytest.raises(NotFoundError):
        crud_course.remove(db_session, context=context_for(instructor_b), db_obj=course)


def test_system_admin_bypasses_organization_but_not_soft_delete(db_session, instructor_a, instructor_b, system_admin):
    course_a = _course(db_session, context_for(instructor_a), "A")
    course_b = _course(db_session, context_for(instructor_b), "B")
    admin = context_for(system_admin)

    assert {c.id for c in crud_course.get_all(db_session, context=admin)} == {course_a.id, course_b.id}

    crud_course.remove(db_session, context=admin, db_obj=course_b)
    crud_course.save_changes(db_session)

    assert [c.id for c in crud_course.get_all(db_session, context=admin)] == [course_a.id]
    assert {c.id for c in crud_course.get_all(db_session, context=admin, include_deleted=True)} == {course_a.id, course_b.id}


def test_find_ands_caller_criteria_with_scope(db_session, instructor_a, instructor_b):
    ctx_a = context_for(instructor_a)
    _course(db_session, ctx_a, "Algebra")
    _course(db_session, ctx_a, "Biology")
    _course(db_session, context_for(instructor_b), "Algebra")

    found = crud_course.find(db_session, Course.name == "Algebra", context=ctx_a)
    assert len(found) == 1
    assert found[0].organization_id == instructor_a.organization_id
    assert crud_course.exists(db_session, Course.name == "Biology", context=ctx_a)
    assert not crud_course.exists(db_session, Course.name == "Biology", context=context_for(instructor_b))


def test_get_all_orders_by_name(db_session, instructor_a):
    ctx = context_for(instructor_a)
    for name in ("Beta", "Alpha", "Gamma"):
        _course(db_session, ctx, name)

    assert [c.name for c in crud_course.get_all(db_session, context=ctx, order_by="name")] == ["Alpha", "Beta", "Gamma"]
    assert [c.name for c in crud_course.get_all(db_session, context=ctx, order_by=Course.name, descending=True)] == ["Gamma", "Beta", "Alpha"]


def test_get_paged(db_session, instructor_a):
    ctx = context_for(instructor_a)
    for name in ("One", "Two", "Three"):
        _course(db_session, ctx, name)

    page = crud_course.get_paged(db_session, context=ctx, page=1, size=2, order_by="name", descending=False)
    assert page.total == 3
    assert page.pages == 2
    assert page.has_next is True
    assert page.has_previous is False
    assert [c.name for c in page.items] == ["One", "Three"]

    last = crud_course.get_paged(db_session, context=ctx, page=2, size=2, order_by="name", descending=False)
    assert [c.name for c in last.items] == ["Two"]
    assert last.has_next is False

    with pytest.raises(ValidationFailedError):
        crud_course.get_paged(db_session, context=ctx, page=0)
    with pytest.raises(ValidationFailedError):
        crud_course.get_paged(db_session, context=ctx, size=0)


def test_update_with_fields_persists_only_those_fields(db_session, instructor_a):
    ctx = context_for(instructor_a)
    course = _course(db_session, ctx, "Old name", description="Old description")
    course.updated_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
    db_session.commit()

    course.name = "New name"
    course.description = "Should not be saved"
    crud_course.update(db_session, context=ctx, db_obj=course, fields=["name"])
    crud_course.save_changes(db_session)
    db_session.expire_all()

    reloaded = crud_course.get(db_session, course.id, context=ctx)
    assert reloaded.name == "New name"
    assert reloaded.description == "Old description"
    assert reloaded.updated_at.replace(tzinfo=None) > datetime(2020, 1, 1)


def test_update_from_schema_ignores_protected_fields(db_session, instructor_a, org_b):
    ctx = context_for(instructor_a)
    course = _course(db_session, ctx, "Name")
    original_id = course.id
    original_created = course.created_at

    crud_course.update(db_session, context=ctx, db_obj=course, obj_in={
        "name": "Renamed",
        "id": uuid.uuid4(),
        "created_at": datetime(2000, 1, 1, tzinfo=timezone.utc),
        "is_deleted": True,
        "organization_id": org_b.id,
    })
    crud_course.save_changes(db_session)
    db_session.expire_all()

    reloaded = crud_course.get(db_session, original_id, context=ctx)
    assert reloaded.name == "Renamed"
    assert reloaded.organization_id == instructor_a.organization_id
    assert reloaded.is_deleted is False
    assert reloaded.created_at == original_created


def test_update_out_of_scope_is_not_found(db_session, instructor_a, instructor_b):
    course = _course(db_session, context_for(instructor_a))
    with pytest.raises(NotFoundError):
        crud_course.update(db_session, context=context_for(instructor_b), db_obj=course, obj_in={"name": "Hijacked"})


def test_save_changes_counts_staged_instances(db_session, instructor_a):
    ctx = context_for(instructor_a)
    crud_course.add(db_session, context=ctx, obj_in={"name": "One"})
    crud_course.add(db_session, context=ctx, obj_in={"name": "Two"})

    assert crud_course.save_changes(db_session) == 2
    assert crud_course.save_changes(db_session) == 0


def test_save_changes_translates_unique_violation(db_session, org_admin_a):
    ctx = context_for(org_admin_a)
    user_data = {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@test.com"}
    crud_user.add(db_session, context=ctx, obj_in=user_data)
    crud_user.save_changes(db_session)

    crud_user.add(db_session, context=ctx, obj_in=dict(user_data))
    with pytest.raises(ConflictError):
        crud_user.save_changes(db_session)

    # The session is usable again after the rollback.
    assert crud_user.get_by_email(db_session, "ADA@test.com", context=ctx) is not None


def test_save_changes_translates_foreign_key_violation(db_session, instructor_a):
    crud_course.add(db_session, context=context_for(instructor_a), obj_in={"name": "Orphan", "category_id": uuid.uuid4()})
    with pytest.raises(ValidationFailedError):
        crud_course.save_changes(db_session)
