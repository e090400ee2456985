"""Read-only content queries behind the public API."""

from collections.abc import Sequence

from devblog_api.db.repositories import PostRepository, ProfileRepository
from devblog_api.exceptions import PostNotFoundError, UserNotFoundError
from devblog_api.schemas import (
    Pagination,
    PostOut,
    PostPage,
    TagCount,
    UserOut,
)
from devblog_api.services.guard import DataStoreGuard


POPULAR_TAGS_LIMIT = 20


class ContentService:
    """Serves posts, tags and user profiles; every query runs through the guard."""

    def __init__(
        self,
        guard: DataStoreGuard,
        posts: PostRepository | None = None,
        profiles: ProfileRepository | None = None,
    ) -> None:
        self.guard = guard
        self.posts = posts or PostRepository()
        self.profiles = profiles or ProfileRepository()

    async def list_posts(
        self,
        *,
        limit: int = 10,
        offset: int = 0,
        tags: Sequence[str] | None = None,
        author: str | None = None,
    ) -> PostPage:
        """Published posts, newest first, optionally filtered by tags (any-of) and author."""
        records, total = await self.guard.run(
            lambda: self.posts.list_published(
                limit=limit, offset=offset, tags=tags, author=author
            ),
            name="list_posts",
        )
        return PostPage(
            data=[PostOut.from_record(record) for record in records],
            pagination=Pagination.build(total, limit, offset),
        )

    async def list_author_posts(
        self, username: str, *, limit: int = 10, offset: int = 0
    ) -> PostPage:
        # an unknown author yields an empty page
        return await self.list_posts(limit=limit, offset=offset, author=username)

    async def get_post(self, username: str, slug: str) -> PostOut:
        record = await self.guard.run(
            lambda: self.posts.get_published(username, slug), name="get_post"
        )
        if record is None:
            raise PostNotFoundError(username, slug)
        return PostOut.from_record(record)

    async def list_tags(self, *, popular: bool = False) -> list[TagCount]:
        """Tag usage counts over published posts; `popular` keeps the top 20."""
        limit = POPULAR_TAGS_LIMIT if popular else None
        counts = await self.guard.run(
            lambda: self.posts.tag_counts(limit), name="list_tags"
        )
        return [TagCount(name=tag, count=count) for tag, count in counts]

    async def get_user(self, username: str) -> UserOut:
        profile = await self.guard.run(
            lambda: self.profiles.get_by_username(username), name="get_user"
        )
        if profile is None:
            raise UserNotFoundError(username)
        post_count, total_views = await self.guard.run(
            lambda: self.profiles.get_post_stats(profile.id), name="get_user_stats"
        )
        return UserOut.from_profile(profile, post_count, total_views)
