import uuid

import pytest
from fastapi.testclient import TestClient

from apirunner.config import RunnerOptions
from apirunner.core.security import BearerTokenAuthenticator, build_authenticate, create_access_token
from apirunner.main import create_app
from apirunner.models.operation import ResolvedOperation
from conftest import StaticApi

SECRET = "test-secret-key-must-be-at-least-32-chars"


async def list_pets(context):
    return [{"name": "rex"}]


async def whoami(context):
    return {"user": context.user}


async def logo(context):
    context.res.set_header("Content-Type", "image/png")
    return b"\x89PNG\x00\xff"


async def explode(context):
    raise RuntimeError("database unavailable")


@pytest.fixture
def api():
    authenticate = build_authenticate({"bearer": BearerTokenAuthenticator(SECRET)}, [["bearer"]])
    return StaticApi(
        {
            ("GET", "/pets"): ResolvedOperation(controller=list_pets),
            ("GET", "/me"): ResolvedOperation(controller=whoami, authenticate=authenticate),
            ("GET", "/logo"): ResolvedOperation(controller=logo),
            ("GET", "/explode"): ResolvedOperation(controller=explode),
        }
    )


@pytest.fixture
def client(api):
    app = create_app(api, RunnerOptions())
    return TestClient(app, raise_server_exceptions=False)


def test_json_controller_result(client):
    response = client.get("/pets")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json() == [{"name": "rex"}]


def test_binary_controller_result(client):
    response = client.get("/logo")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == b"\x89PNG\x00\xff"


def test_unmatched_route_returns_404(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_authentication_required(client):
    response = client.get("/me")

    assert response.status_code == 401
    assert "bearer" in response.json()["message"]


def test_authenticated_user_is_exposed(client):
    token = create_access_token("alice", SECRET)

    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"user": "alice"}


def test_unrecognized_error_returns_500(client):
    response = client.get("/explode")

    assert response.status_code == 500
    assert response.json() == {
        "message": "Internal Server Error",
        "detail": "database unavailable",
    }


def test_request_id_is_generated(client):
    response = client.get("/pets")

    uuid.UUID(response.headers["X-Request-Id"])


def test_request_id_is_propagated(client):
    response = client.get("/pets", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"
