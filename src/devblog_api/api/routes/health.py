"""Health check endpoint; public, outside the API gate."""

from fastapi import APIRouter

from devblog_api import __version__
from devblog_api.schemas import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
