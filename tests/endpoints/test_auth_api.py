import uuid
from datetime import timedelta

from fastapi.testclient import TestClient

from app.core.constants import UserRoleEnum
from app.core.security import create_access_token
from tests.helpers.asserts import assert_error


def test_missing_token_is_unauthorized(client: TestClient):
    response = client.get("/courses/")
    body = assert_error(response, 401, "UNAUTHORIZED")
    assert body["request_id"] == response.headers["X-Request-ID"]


def test_garbage_token_is_unauthorized(client: TestClient):
    response = client.get("/courses/", headers={"Authorization": "Bearer not-a-jwt"})
    assert_error(response, 401, "UNAUTHORIZED")


def test_expired_token_is_unauthorized(client: TestClient):
    token = create_access_token(uuid.uuid4(), uuid.uuid4(), UserRoleEnum.STUDENT, expires_delta=timedelta(minutes=-5))
    response = client.get("/courses/", headers={"Authorization": f"Bearer {token}"})
    assert_error(response, 401, "UNAUTHORIZED")


def test_unknown_role_is_unauthorized_not_admin(client: TestClient):
    token = create_access_token(uuid.uuid4(), None, "overlord")
    response = client.get("/organizations/", headers={"Authorization": f"Bearer {token}"})
    assert_error(response, 401, "UNAUTHORIZED")


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/courses/", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"
