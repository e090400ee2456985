"""Post repository for read-only content queries."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from devblog_api.db.engine import get_session
from devblog_api.db.models import Post, PostStatus, PostTag, Profile


@dataclass
class PostRecord:
    """A published post joined with its author and tag list."""

    post: Post
    author: Profile
    tags: list[str] = field(default_factory=list)


def _published_conditions(
    tags: Sequence[str] | None = None,
    author: str | None = None,
) -> list:
    conditions = [col(Post.status) == PostStatus.PUBLISHED]
    if author:
        conditions.append(col(Profile.username) == author)
    if tags:
        # any-of match
        conditions.append(
            col(Post.id).in_(
                select(PostTag.post_id).where(col(PostTag.tag).in_(list(tags)))
            )
        )
    return conditions


class PostRepository:
    """Repository for published post queries."""

    async def list_published(
        self,
        *,
        limit: int,
        offset: int,
        tags: Sequence[str] | None = None,
        author: str | None = None,
    ) -> tuple[list[PostRecord], int]:
        """Page through published posts, newest first.

        Returns:
            The page of posts and the total number of matching posts
        """
        conditions = _published_conditions(tags, author)
        async with get_session() as session:
            page = await session.execute(
                select(Post, Profile)
                .join(Profile, col(Post.user_id) == col(Profile.id))
                .where(*conditions)
                .order_by(col(Post.created_at).desc(), col(Post.id))
                .offset(offset)
                .limit(limit)
            )
            rows = page.all()

            total_result = await session.execute(
                select(func.count())
                .select_from(Post)
                .join(Profile, col(Post.user_id) == col(Profile.id))
                .where(*conditions)
            )
            total = total_result.scalar_one()

            tags_by_post = await self._load_tags(session, [post.id for post, _ in rows])

        records = [
            PostRecord(post=post, author=profile, tags=tags_by_post.get(post.id, []))
            for post, profile in rows
        ]
        return records, total

    async def get_published(self, username: str, slug: str) -> PostRecord | None:
        """Get one published post by author username and slug."""
        async with get_session() as session:
            result = await session.execute(
                select(Post, Profile)
                .join(Profile, col(Post.user_id) == col(Profile.id))
                .where(
                    *_published_conditions(author=username),
                    col(Post.slug) == slug,
                )
            )
            row = result.first()
            if row is None:
                return None
            post, profile = row
            tags_by_post = await self._load_tags(session, [post.id])

        return PostRecord(post=post, author=profile, tags=tags_by_post.get(post.id, []))

    async def tag_counts(self, limit: int | None = None) -> list[tuple[str, int]]:
        """Count published posts per tag, most used first, ties by name."""
        post_count = func.count(col(PostTag.post_id)).label("count")
        stmt = (
            select(PostTag.tag, post_count)
            .join(Post, col(PostTag.post_id) == col(Post.id))
            .where(col(Post.status) == PostStatus.PUBLISHED)
            .group_by(col(PostTag.tag))
            .order_by(post_count.desc(), col(PostTag.tag))
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        async with get_session() as session:
            result = await session.execute(stmt)
            return [(tag, count) for tag, count in result.all()]

    @staticmethod
    async def _load_tags(
        session: AsyncSession, post_ids: list[str]
    ) -> dict[str, list[str]]:
        if not post_ids:
            return {}
        result = await session.execute(
            select(PostTag)
            .where(col(PostTag.post_id).in_(post_ids))
            .order_by(col(PostTag.post_id), col(PostTag.position))
        )
        tags_by_post: dict[str, list[str]] = {}
        for link in result.scalars().all():
            tags_by_post.setdefault(link.post_id, []).append(link.tag)
        return tags_by_post
