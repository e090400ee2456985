"""Profile repository for database operations."""

from sqlalchemy import func
from sqlmodel import col, select

from devblog_api.db.engine import get_session
from devblog_api.db.models import Post, PostStatus, Profile


class ProfileRepository:
    """Repository for Profile lookups."""

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by its unique username."""
        async with get_session() as session:
            result = await session.execute(
                select(Profile).where(Profile.username == username)
            )
            return result.scalar_one_or_none()

    async def get_post_stats(self, profile_id: str) -> tuple[int, int]:
        """Count a profile's published posts and sum their views.

        Returns:
            Tuple of (post_count, total_views)
        """
        async with get_session() as session:
            result = await session.execute(
                select(
                    func.count(col(Post.id)),
                    func.coalesce(func.sum(col(Post.view_count)), 0),
                ).where(
                    col(Post.user_id) == profile_id,
                    col(Post.status) == PostStatus.PUBLISHED,
                )
            )
            post_count, total_views = result.one()
            return int(post_count), int(total_views)
