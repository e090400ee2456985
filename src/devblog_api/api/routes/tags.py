"""Tag statistics endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from devblog_api.api.dependencies import ContentServiceDep
from devblog_api.schemas import TagList


router = APIRouter(tags=["tags"])


@router.get("/tags", response_model=TagList)
async def list_tags(
    service: ContentServiceDep,
    popular: Annotated[
        str | None, Query(description="`true` keeps only the 20 most used tags")
    ] = None,
) -> TagList:
    """Tag usage over published posts, most used first."""
    # Only the exact string "true" enables truncation
    return TagList(data=await service.list_tags(popular=popular == "true"))
