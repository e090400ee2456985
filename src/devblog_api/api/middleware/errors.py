"""Error handlers for the DevBlog API.

Every error body is the flat `{"error": message, ...}` object produced by
`DevBlogError.to_dict`, including framework 404s and validation failures.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from devblog_api.auth.api_keys.errors import error_response
from devblog_api.exceptions import (
    DevBlogError,
    NotFoundError,
    ValidationError,
)


logger = get_logger(__name__)


def _store_status_code(request: Request, status_code: int) -> None:
    """Store status code in request state for access logging."""
    if hasattr(request.state, "context") and hasattr(request.state.context, "metadata"):
        request.state.context.metadata["status_code"] = status_code


def _get_client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and answer with a bare 500."""
    _store_status_code(request, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.error(
        "unhandled_exception",
        error_type="unhandled_exception",
        error_message=str(exc),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        request_method=request.method,
        request_url=str(request.url.path),
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""
    logger.debug("error_handlers_setup_start")

    @app.exception_handler(DevBlogError)
    async def devblog_error_handler(
        request: Request, exc: DevBlogError
    ) -> JSONResponse:
        """Handle all DevBlogError subclasses using their built-in attributes."""
        _store_status_code(request, exc.status_code)

        log_kwargs = {
            "error_type": exc.error_type.value,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_url": str(request.url.path),
        }
        if exc.status_code in (401, 403, 429):
            log_kwargs["client_ip"] = _get_client_ip(request)

        if exc.status_code >= 500:
            logger.error("devblog_error", **log_kwargs)
        else:
            logger.info("devblog_error", **log_kwargs)

        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Answer invalid query or path parameters with 400."""
        errors = jsonable_encoder(exc.errors())
        _store_status_code(request, status.HTTP_400_BAD_REQUEST)
        logger.info(
            "request_validation_failed",
            request_method=request.method,
            request_url=str(request.url.path),
            error_count=len(errors),
        )
        return error_response(ValidationError(details={"detail": errors}))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle framework HTTP exceptions such as unmatched routes."""
        _store_status_code(request, exc.status_code)

        if exc.status_code == status.HTTP_404_NOT_FOUND:
            logger.debug("endpoint_not_found", request_url=str(request.url.path))
            return error_response(NotFoundError())

        logger.info(
            "http_exception",
            status_code=exc.status_code,
            error_message=exc.detail,
            request_method=request.method,
            request_url=str(request.url.path),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle all other unhandled exceptions."""
        return internal_error_response(request, exc)

    logger.debug("error_handlers_setup_completed")
