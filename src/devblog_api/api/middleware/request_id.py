"""Request ID middleware for generating and tracking request IDs."""

import shortuuid
import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from devblog_api.api.middleware.errors import internal_error_response
from devblog_api.core.request_context import RequestContext


REQUEST_ID_HEADER = "x-request-id"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware for generating request IDs and initializing request context.

    Unexpected exceptions become the 500 response here, inside the CORS layer,
    so the error still carries the request id and CORS headers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Reuse the caller's id when one is supplied
        request_id = request.headers.get(REQUEST_ID_HEADER) or shortuuid.uuid()

        ctx = RequestContext(
            request_id=request_id,
            method=request.method,
            path=str(request.url.path),
        )
        request.state.request_id = request_id
        request.state.context = ctx

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                response = internal_error_response(request, e)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
