"""API middleware for the DevBlog API server."""

from devblog_api.api.middleware.api_gate import APIGateMiddleware
from devblog_api.api.middleware.cors import get_cors_config, setup_cors_middleware
from devblog_api.api.middleware.errors import setup_error_handlers
from devblog_api.api.middleware.logging import AccessLogMiddleware
from devblog_api.api.middleware.request_id import RequestIDMiddleware


__all__ = [
    "APIGateMiddleware",
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "get_cors_config",
    "setup_cors_middleware",
    "setup_error_handlers",
]
