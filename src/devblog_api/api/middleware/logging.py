"""Access logging middleware for structured HTTP request/response logging."""

import asyncio
import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger(__name__)


def _extract_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    return str(request_id) if request_id is not None else None


def _extract_rate_limit_info(response: Response) -> dict[str, Any]:
    """Collect the X-RateLimit-* and Retry-After headers of a response."""
    rate_limit_info: dict[str, Any] = {}
    for header_name, header_value in response.headers.items():
        header_lower = header_name.lower()
        if header_lower.startswith("x-ratelimit-") or header_lower == "retry-after":
            rate_limit_info[header_lower.replace("-", "_")] = header_value
    return rate_limit_info


def _update_context_metadata(
    request: Request, rate_limit_info: dict[str, Any], status_code: int
) -> None:
    context = getattr(request.state, "context", None)
    if context is None:
        return
    context.add_metadata(status_code=status_code, **rate_limit_info)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Middleware for structured access logging with request/response details."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request and log access details.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler in the chain

        Returns:
            The HTTP response

        """
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = str(request.url.path)
        query = str(request.url.query) if request.url.query else None
        user_agent = request.headers.get("user-agent", "unknown")
        request_id = _extract_request_id(request)

        response: Response | None = None
        error_message: str | None = None

        try:
            response = await call_next(request)
        except (Exception, asyncio.CancelledError) as e:
            error_message = str(e)
            raise
        finally:
            self._log_request(
                request=request,
                response=response,
                start_time=start_time,
                request_id=request_id,
                method=method,
                path=path,
                query=query,
                client_ip=client_ip,
                user_agent=user_agent,
                error_message=error_message,
            )

        return response

    def _log_request(
        self,
        *,
        request: Request,
        response: Response | None,
        start_time: float,
        request_id: str | None,
        method: str,
        path: str,
        query: str | None,
        client_ip: str,
        user_agent: str,
        error_message: str | None,
    ) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000

        if response is not None:
            rate_limit_info = _extract_rate_limit_info(response)
            _update_context_metadata(request, rate_limit_info, response.status_code)

            logger.info(
                "request_complete",
                request_id=request_id or "unknown",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                client_ip=client_ip,
                user_agent=user_agent,
                query=query,
                user_id=getattr(request.state, "user_id", None),
                **rate_limit_info,
            )
        else:
            logger.error(
                "request_error",
                request_id=request_id,
                method=method,
                path=path,
                query=query,
                client_ip=client_ip,
                user_agent=user_agent,
                duration_ms=round(duration_ms, 2),
                error_message=error_message or "No response generated",
            )
