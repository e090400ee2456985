"""Repository layer for database operations."""

from devblog_api.db.repositories.api_key_repo import ApiKeyRepository
from devblog_api.db.repositories.post_repo import PostRecord, PostRepository
from devblog_api.db.repositories.profile_repo import ProfileRepository


__all__ = ["ApiKeyRepository", "PostRecord", "PostRepository", "ProfileRepository"]
