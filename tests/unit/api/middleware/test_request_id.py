"""Tests for request id and access log middleware."""

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from devblog_api.api.middleware.logging import AccessLogMiddleware
from devblog_api.api.middleware.request_id import RequestIDMiddleware


def _client() -> TestClient:
    app = FastAPI()
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {
            "request_id": request.state.request_id,
            "path": request.state.context.path,
        }

    return TestClient(app)


def test_generates_request_id() -> None:
    response = _client().get("/echo")

    request_id = response.headers["x-request-id"]
    assert request_id
    assert response.json() == {"request_id": request_id, "path": "/echo"}


def test_reuses_caller_request_id() -> None:
    response = _client().get("/echo", headers={"x-request-id": "abc-123"})

    assert response.headers["x-request-id"] == "abc-123"
    assert response.json()["request_id"] == "abc-123"


def test_unexpected_error_keeps_request_id() -> None:
    app = FastAPI()
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    response = TestClient(app).get("/boom", headers={"x-request-id": "req-500"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers["x-request-id"] == "req-500"
