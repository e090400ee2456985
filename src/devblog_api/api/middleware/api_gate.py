"""API gate middleware for protecting the content routes."""

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from devblog_api.auth.api_keys import (
    DEFAULT_GATED_ROUTES,
    APIGate,
    GatedRoutesConfig,
)
from devblog_api.auth.api_keys.errors import error_response
from devblog_api.exceptions import DevBlogError


logger = structlog.get_logger(__name__)


class APIGateMiddleware(BaseHTTPMiddleware):
    """Authenticates and charges every request to a gated route.

    Runs before the route handler, so a handler failure never refunds the
    charge. Rate-limit headers are attached to 2xx responses only.
    """

    def __init__(
        self,
        app: ASGIApp,
        gate: APIGate | None = None,
        gated_routes: GatedRoutesConfig | None = None,
    ):
        """Initialize the API gate middleware.

        Args:
            app: The ASGI application
            gate: Gate to use; defaults to `app.state.gate` at request time
            gated_routes: Optional custom gated routes configuration

        """
        super().__init__(app)
        self.gate = gate
        self.gated_routes = gated_routes or DEFAULT_GATED_ROUTES

    def _get_gate(self, request: Request) -> APIGate:
        if self.gate is not None:
            return self.gate
        return request.app.state.gate

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request through the gate.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler in the chain

        Returns:
            The handler's response, or the gate's 401/429/5xx error response

        """
        path = request.url.path

        if not self.gated_routes.is_gated(path):
            return await call_next(request)

        # Preflights are answered by the CORS middleware; this is a bare OPTIONS
        if request.method == "OPTIONS":
            return Response(status_code=200)

        try:
            auth_result = await self._get_gate(request).authenticate(
                request.headers.get("authorization")
            )
        except DevBlogError as exc:
            logger.info(
                "api_gate_rejected",
                path=path,
                method=request.method,
                status_code=exc.status_code,
                error_type=exc.error_type.value,
            )
            return error_response(exc)

        request.state.auth = auth_result
        request.state.user_id = auth_result.user_id

        response = await call_next(request)

        if 200 <= response.status_code < 300:
            APIGate.decorate_response(response, auth_result)
        return response
