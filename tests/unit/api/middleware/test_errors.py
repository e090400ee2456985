"""Tests for the error handlers."""

from typing import Annotated

import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from devblog_api.api.middleware.errors import setup_error_handlers
from devblog_api.exceptions import UserNotFoundError


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    setup_error_handlers(app)

    @app.get("/items")
    async def items(limit: Annotated[int, Query(ge=1, le=100)] = 10):
        return {"limit": limit}

    @app.get("/users/{username}")
    async def user(username: str):
        raise UserNotFoundError(username)

    @app.get("/crash")
    async def crash():
        raise RuntimeError("unexpected")

    return TestClient(app, raise_server_exceptions=False)


def test_domain_error(client: TestClient) -> None:
    response = client.get("/users/nobody")
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_unknown_route(client: TestClient) -> None:
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found"}


@pytest.mark.parametrize("limit", ["0", "101", "ten"])
def test_invalid_query_parameter(client: TestClient, limit: str) -> None:
    response = client.get("/items", params={"limit": limit})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request parameters"
    assert body["detail"][0]["loc"] == ["query", "limit"]


def test_method_not_allowed(client: TestClient) -> None:
    response = client.post("/items")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}


def test_unhandled_exception(client: TestClient) -> None:
    response = client.get("/crash")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
