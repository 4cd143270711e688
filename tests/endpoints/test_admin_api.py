from fastapi.testclient import TestClient

from tests.helpers.asserts import api_data, assert_error
from tests.helpers.auth import auth_headers


def test_system_admin_creates_an_organization(client: TestClient, system_admin, org_admin_a):
    payload = {"name": "Night School", "slug": "night-school"}
    org = api_data(client, "POST", "/organizations/", headers=auth_headers(system_admin), json=payload)
    assert org["slug"] == "night-school"

    assert_error(client.post("/organizations/", headers=auth_headers(system_admin), json=payload), 409, "CONFLICT")
    assert_error(client.post("/organizations/", headers=auth_headers(org_admin_a), json={"name": "X", "slug": "x"}), 403, "FORBIDDEN")


def test_bad_slug_is_a_validation_error(client: TestClient, system_admin):
    response = client.post("/organizations/", headers=auth_headers(system_admin), json={"name": "Bad", "slug": "Not A Slug"})
    assert_error(response, 422, "VALIDATION_ERROR")


def test_members_only_see_their_own_organization(client: TestClient, org_admin_a, org_a, org_b):
    headers = auth_headers(org_admin_a)
    assert api_data(client, "GET", f"/organizations/{org_a.id}", headers=headers)["name"] == "Org A"
    assert_error(client.get(f"/organizations/{org_b.id}", headers=headers), 404, "NOT_FOUND")


def test_org_admin_creates_users_in_own_organization(client: TestClient, org_admin_a, org_a):
    headers = auth_headers(org_admin_a)
    payload = {"first_name": "Ada", "last_name": "Lovelace", "email": "Ada@School.com", "role": "instructor"}

    user = api_data(client, "POST", "/users/", headers=headers, json=payload)
    assert user["organization_id"] == str(org_a.id)
    assert user["full_name"] == "Ada Lovelace"

    found = api_data(client, "GET", "/users/by-email?email=ada@school.com", headers=headers)
    assert found["id"] == user["id"]

    assert_error(client.post("/users/", headers=headers, json=payload), 409, "CONFLICT")


def test_org_admin_cannot_grant_system_admin(client: TestClient, org_admin_a):
    payload = {"first_name": "Eve", "last_name": "Root", "email": "eve@school.com", "role": "system_admin"}
    assert_error(client.post("/users/", headers=auth_headers(org_admin_a), json=payload), 403, "FORBIDDEN")


def test_me_returns_the_caller(client: TestClient, student_a):
    me = api_data(client, "GET", "/users/me", headers=auth_headers(student_a))
    assert me["id"] == str(student_a.id)
    assert me["role"] == "student"


def test_email_taken_in_another_organization_does_not_leak(client: TestClient, org_admin_a, org_a, student_b):
    headers = auth_headers(org_admin_a)
    foreign = {"first_name": "Same", "last_name": "Address", "email": student_b.email, "role": "student"}
    fresh = {"first_name": "New", "last_name": "Address", "email": "nobody-yet@school.com", "role": "student"}

    foreign_response = client.post("/users/", headers=headers, json=foreign)
    fresh_response = client.post("/users/", headers=headers, json=fresh)

    assert foreign_response.status_code == fresh_response.status_code == 201
    created = foreign_response.json()["data"]
    assert created["organization_id"] == str(org_a.id)
    assert created["id"] != str(student_b.id)


def test_system_admin_checks_duplicates_in_the_target_organization(client: TestClient, system_admin, student_a, org_a, org_b):
    headers = auth_headers(system_admin)
    payload = {"first_name": "Twin", "last_name": "Account", "email": student_a.email.upper(), "role": "student"}

    created = api_data(client, "POST", "/users/", headers=headers, json={**payload, "organization_id": str(org_b.id)})
    assert created["organization_id"] == str(org_b.id)
    assert created["email"] == student_a.email

    response = client.post("/users/", headers=headers, json={**payload, "organization_id": str(org_a.id)})
    assert_error(response, 409, "CONFLICT")
