from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, api_data, assert_error
from tests.helpers.auth import auth_headers


def test_instructor_course_lifecycle(client: TestClient, instructor_a, org_a):
    headers = auth_headers(instructor_a)

    created = api_call(client, "POST", "/courses/", headers=headers, json={"name": "Chemistry", "description": "Atoms"})
    assert created.status_code == 201
    course = created.json()["data"]
    assert course["organization_id"] == str(org_a.id)

    updated = api_data(client, "PUT", f"/courses/{course['id']}", headers=headers, json={"name": "Chemistry 101", "description": ""})
    assert updated["name"] == "Chemistry 101"
    assert updated["description"] == "Atoms"

    api_call(client, "DELETE", f"/courses/{course['id']}", headers=headers)
    assert_error(client.get(f"/courses/{course['id']}", headers=headers), 404, "NOT_FOUND")

    restored = api_data(client, "POST", f"/courses/{course['id']}/restore", headers=headers)
    assert restored["id"] == course["id"]


def test_students_get_forbidden_for_authoring(client: TestClient, student_a):
    response = client.post("/courses/", headers=auth_headers(student_a), json={"name": "Nope"})
    assert_error(response, 403, "FORBIDDEN")


def test_request_validation_uses_error_envelope(client: TestClient, instructor_a):
    response = client.post("/courses/", headers=auth_headers(instructor_a), json={"description": "no name"})
    body = assert_error(response, 422, "VALIDATION_ERROR")
    assert body["error"]["details"]["validation_errors"]


def test_malformed_path_id_is_a_validation_error(client: TestClient, instructor_a):
    response = client.get("/courses/not-a-uuid", headers=auth_headers(instructor_a))
    assert_error(response, 422, "VALIDATION_ERROR")


def test_courses_are_listed_in_requested_order(client: TestClient, instructor_a):
    headers = auth_headers(instructor_a)
    for name in ("Beta", "Alpha", "Gamma"):
        api_call(client, "POST", "/courses/", headers=headers, json={"name": name})

    names = [c["name"] for c in api_data(client, "GET", "/courses/?order_by=name&descending=true", headers=headers)]
    assert names == ["Gamma", "Beta", "Alpha"]
    assert_error(client.get("/courses/?order_by=organization_id", headers=headers), 422, "VALIDATION_ERROR")


def test_courses_by_category(client: TestClient, instructor_a):
    headers = auth_headers(instructor_a)
    category = api_data(client, "POST", "/categories/", headers=headers, json={"name": "Science"})
    api_call(client, "POST", "/courses/", headers=headers, json={"name": "Physics", "category_id": category["id"]})
    api_call(client, "POST", "/courses/", headers=headers, json={"name": "Poetry"})

    courses = api_data(client, "GET", f"/categories/{category['id']}/courses", headers=headers)
    assert [c["name"] for c in courses] == ["Physics"]
