"""API routes for the DevBlog API server."""

from devblog_api.api.routes.health import router as health_router
from devblog_api.api.routes.posts import router as posts_router
from devblog_api.api.routes.tags import router as tags_router
from devblog_api.api.routes.users import router as users_router


__all__ = [
    "health_router",
    "posts_router",
    "tags_router",
    "users_router",
]
