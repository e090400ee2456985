"""Published post endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from devblog_api.api.dependencies import ContentServiceDep
from devblog_api.core.validators import parse_comma_separated
from devblog_api.schemas import PostEnvelope, PostPage


router = APIRouter(tags=["posts"])

LimitQuery = Annotated[int, Query(ge=1, le=100, description="Page size")]
OffsetQuery = Annotated[int, Query(ge=0, description="Posts to skip")]


@router.get("/posts", response_model=PostPage)
async def list_posts(
    service: ContentServiceDep,
    limit: LimitQuery = 10,
    offset: OffsetQuery = 0,
    tags: Annotated[
        str | None, Query(description="Comma-separated tags; any may match")
    ] = None,
    author: Annotated[str | None, Query(description="Author username")] = None,
) -> PostPage:
    """List published posts, newest first."""
    tag_list = parse_comma_separated(tags) if tags else None
    return await service.list_posts(
        limit=limit, offset=offset, tags=tag_list or None, author=author or None
    )


@router.get("/posts/{username}", response_model=PostPage)
async def list_author_posts(
    username: str,
    service: ContentServiceDep,
    limit: LimitQuery = 10,
    offset: OffsetQuery = 0,
) -> PostPage:
    """List one author's published posts; an unknown author yields an empty page."""
    return await service.list_author_posts(username, limit=limit, offset=offset)


@router.get("/posts/{username}/{slug}", response_model=PostEnvelope)
async def get_post(username: str, slug: str, service: ContentServiceDep) -> PostEnvelope:
    post = await service.get_post(username, slug)
    return PostEnvelope(data=post)
