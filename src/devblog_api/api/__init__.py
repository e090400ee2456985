"""API layer for the DevBlog API server."""

from devblog_api.api.app import create_app
from devblog_api.api.dependencies import ContentServiceDep, get_content_service


__all__ = [
    "ContentServiceDep",
    "create_app",
    "get_content_service",
]
