"""JSON error responses shared by the gate middleware and exception handlers."""

from fastapi.responses import JSONResponse

from devblog_api.exceptions import DevBlogError


def error_response(exc: DevBlogError) -> JSONResponse:
    """Render a DevBlogError as its flat JSON body, status and headers.

    No X-RateLimit-* headers are ever attached here.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers or None,
    )
