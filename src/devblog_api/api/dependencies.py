"""FastAPI dependency providers."""

from typing import Annotated

from fastapi import Depends, Request

from devblog_api.services import ContentService


def get_content_service(request: Request) -> ContentService:
    """Content service built by `create_app`."""
    return request.app.state.content_service


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
