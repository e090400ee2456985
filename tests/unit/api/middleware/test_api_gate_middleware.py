"""Tests for the API gate middleware."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, Request, status
from fastapi.testclient import TestClient

from devblog_api.api.middleware.api_gate import APIGateMiddleware
from devblog_api.api.middleware.errors import setup_error_handlers
from devblog_api.auth.api_keys import APIGate, AuthResult
from devblog_api.exceptions import (
    DataStoreError,
    DataStoreTimeoutError,
    InvalidAPIKeyError,
    MissingAPIKeyError,
    PostNotFoundError,
    RateLimitExceededError,
)


RATE_HEADERS = ("x-ratelimit-limit", "x-ratelimit-remaining", "x-ratelimit-used")


@pytest.fixture
def gate() -> MagicMock:
    gate = MagicMock(spec=APIGate)
    gate.authenticate = AsyncMock(
        return_value=AuthResult(
            user_id="user-1", key_id="key_1", rate_limit=1000, usage_before=41
        )
    )
    return gate


@pytest.fixture
def client(gate: MagicMock) -> TestClient:
    app = FastAPI()
    setup_error_handlers(app)
    app.add_middleware(APIGateMiddleware, gate=gate)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/posts")
    async def posts():
        return {"data": []}

    @app.get("/api/whoami")
    async def whoami(request: Request):
        return {"user_id": request.state.auth.user_id}

    @app.get("/api/posts/{username}/{slug}")
    async def post(username: str, slug: str):
        raise PostNotFoundError(username, slug)

    @app.get("/api/broken")
    async def broken():
        raise DataStoreError()

    return TestClient(app)


class TestGatedRoutes:
    def test_success_carries_rate_limit_headers(
        self, client: TestClient, gate: MagicMock
    ) -> None:
        response = client.get("/api/posts", headers={"Authorization": "Bearer ws_1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["X-RateLimit-Limit"] == "1000"
        assert response.headers["X-RateLimit-Remaining"] == "958"
        assert response.headers["X-RateLimit-Used"] == "42"
        gate.authenticate.assert_awaited_once_with("Bearer ws_1")

    def test_auth_result_reaches_handler(self, client: TestClient) -> None:
        response = client.get("/api/whoami", headers={"Authorization": "Bearer ws_1"})
        assert response.json() == {"user_id": "user-1"}

    def test_handler_error_has_no_rate_limit_headers(
        self, client: TestClient, gate: MagicMock
    ) -> None:
        response = client.get(
            "/api/posts/ada/missing", headers={"Authorization": "Bearer ws_1"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Post not found"}
        assert not any(header in response.headers for header in RATE_HEADERS)
        gate.authenticate.assert_awaited_once()

    def test_store_failure_in_handler(self, client: TestClient) -> None:
        response = client.get("/api/broken", headers={"Authorization": "Bearer ws_1"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "x-ratelimit-used" not in response.headers

    def test_unknown_api_path(self, client: TestClient) -> None:
        response = client.get("/api/nope", headers={"Authorization": "Bearer ws_1"})

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}
        assert "x-ratelimit-used" not in response.headers


class TestRejections:
    def test_missing_key(self, client: TestClient, gate: MagicMock) -> None:
        gate.authenticate.side_effect = MissingAPIKeyError()

        response = client.get("/api/posts")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Invalid or missing API key"}
        assert response.headers["WWW-Authenticate"] == "Bearer"
        gate.authenticate.assert_awaited_once_with(None)

    def test_invalid_key(self, client: TestClient, gate: MagicMock) -> None:
        gate.authenticate.side_effect = InvalidAPIKeyError()

        response = client.get("/api/posts", headers={"Authorization": "Bearer bad"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid API key"}

    def test_rate_limited(self, client: TestClient, gate: MagicMock) -> None:
        gate.authenticate.side_effect = RateLimitExceededError(3600)

        response = client.get("/api/posts", headers={"Authorization": "Bearer ws_1"})

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json() == {"error": "Rate limit exceeded", "retry_after": 3600}
        assert response.headers["Retry-After"] == "3600"
        assert not any(header in response.headers for header in RATE_HEADERS)

    def test_store_timeout(self, client: TestClient, gate: MagicMock) -> None:
        gate.authenticate.side_effect = DataStoreTimeoutError()

        response = client.get("/api/posts", headers={"Authorization": "Bearer ws_1"})

        assert response.status_code == 503
        assert response.json() == {"error": "Service temporarily unavailable"}


class TestBypass:
    def test_public_route(self, client: TestClient, gate: MagicMock) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        gate.authenticate.assert_not_called()

    def test_bare_options_is_empty_200(self, client: TestClient, gate: MagicMock) -> None:
        response = client.options("/api/posts")

        assert response.status_code == 200
        assert response.content == b""
        gate.authenticate.assert_not_called()


def test_gate_read_from_app_state(gate: MagicMock) -> None:
    app = FastAPI()
    app.state.gate = gate
    app.add_middleware(APIGateMiddleware)

    @app.get("/api/tags")
    async def tags():
        return {"data": []}

    response = TestClient(app).get("/api/tags", headers={"Authorization": "Bearer x"})

    assert response.status_code == 200
    gate.authenticate.assert_awaited_once()
