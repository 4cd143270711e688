import uuid

from fastapi.testclient import TestClient

from tests.helpers.asserts import api_data
from tests.helpers.auth import auth_headers


def test_cross_tenant_read_looks_like_a_missing_course(client: TestClient, instructor_a, instructor_b):
    course = api_data(client, "POST", "/courses/", headers=auth_headers(instructor_a), json={"name": "Private"})

    foreign = client.get(f"/courses/{course['id']}", headers=auth_headers(instructor_b))
    missing = client.get(f"/courses/{uuid.uuid4()}", headers=auth_headers(instructor_b))

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["error"] == missing.json()["error"]


def test_cross_tenant_writes_are_not_found(client: TestClient, instructor_a, instructor_b):
    course = api_data(client, "POST", "/courses/", headers=auth_headers(instructor_a), json={"name": "Private"})
    headers_b = auth_headers(instructor_b)

    assert client.put(f"/courses/{course['id']}", headers=headers_b, json={"name": "Mine now"}).status_code == 404
    assert client.delete(f"/courses/{course['id']}", headers=headers_b).status_code == 404
    assert client.post("/lessons/", headers=headers_b, json={"title": "Sneaky", "course_id": course["id"]}).status_code == 404

    still_there = api_data(client, "GET", f"/courses/{course['id']}", headers=auth_headers(instructor_a))
    assert still_there["name"] == "Private"


def test_listings_only_show_own_organization(client: TestClient, instructor_a, instructor_b, system_admin):
    api_data(client, "POST", "/courses/", headers=auth_headers(instructor_a), json={"name": "A course"})
    api_data(client, "POST", "/courses/", headers=auth_headers(instructor_b), json={"name": "B course"})

    assert [c["name"] for c in api_data(client, "GET", "/courses/", headers=auth_headers(instructor_a))] == ["A course"]
    assert [c["name"] for c in api_data(client, "GET", "/courses/", headers=auth_headers(instructor_b))] == ["B course"]

    everything = api_data(client, "GET", "/courses/?order_by=name", headers=auth_headers(system_admin))
    assert [c["name"] for c in everything] == ["A course", "B course"]
