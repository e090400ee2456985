"""Public user profile endpoint."""

from fastapi import APIRouter

from devblog_api.api.dependencies import ContentServiceDep
from devblog_api.schemas import UserEnvelope


router = APIRouter(tags=["users"])


@router.get("/users/{username}", response_model=UserEnvelope)
async def get_user(username: str, service: ContentServiceDep) -> UserEnvelope:
    """Profile plus post count and total views over published posts."""
    return UserEnvelope(data=await service.get_user(username))
