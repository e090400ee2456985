"""Shared fixtures: a temporary SQLite database and content/key factories."""

from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime

import pytest

from devblog_api.auth.api_keys import APIKeyCreate, APIKeyManager
from devblog_api.db import close_db, get_session, init_db
from devblog_api.db.models import ApiKey, Post, PostStatus, PostTag, Profile


@pytest.fixture
async def temp_db(tmp_path):
    """Initialise a fresh database file for one test."""
    db_path = tmp_path / "test.db"
    await init_db(db_path)
    yield db_path
    await close_db()


@pytest.fixture
def make_profile(temp_db) -> Callable[..., Awaitable[Profile]]:
    async def _make(username: str = "ada", **fields) -> Profile:
        profile = Profile(
            username=username,
            display_name=fields.pop("display_name", username.title()),
            **fields,
        )
        async with get_session() as session:
            session.add(profile)
        return profile

    return _make


@pytest.fixture
def make_post(temp_db) -> Callable[..., Awaitable[Post]]:
    async def _make(
        author: Profile,
        slug: str,
        *,
        tags: Iterable[str] = (),
        status: PostStatus = PostStatus.PUBLISHED,
        created_at: datetime | None = None,
        view_count: int = 0,
    ) -> Post:
        created = created_at or datetime.now(UTC)
        post = Post(
            user_id=author.id,
            title=slug.replace("-", " ").title(),
            slug=slug,
            excerpt=f"About {slug}",
            markdown_content=f"# {slug}",
            html_content=f"<h1>{slug}</h1>",
            status=status,
            view_count=view_count,
            created_at=created,
            updated_at=created,
        )
        async with get_session() as session:
            session.add(post)
            for position, tag in enumerate(tags):
                session.add(PostTag(post_id=post.id, tag=tag, position=position))
        return post

    return _make


@pytest.fixture
def make_api_key(temp_db) -> Callable[..., Awaitable[tuple[ApiKey, str]]]:
    async def _make(
        profile: Profile, *, rate_limit: int = 1000, name: str = "test key"
    ) -> tuple[ApiKey, str]:
        return await APIKeyManager().create_key(
            APIKeyCreate(user_id=profile.id, name=name, rate_limit=rate_limit)
        )

    return _make


@pytest.fixture
def set_usage(temp_db) -> Callable[[str, int], Awaitable[None]]:
    """Force a key's usage counter, bypassing the gate."""

    async def _set(key_id: str, usage_count: int) -> None:
        async with get_session() as session:
            api_key = await session.get(ApiKey, key_id)
            assert api_key is not None
            api_key.usage_count = usage_count
            session.add(api_key)

    return _set


@pytest.fixture
def get_usage(temp_db) -> Callable[[str], Awaitable[int]]:
    async def _get(key_id: str) -> int:
        async with get_session() as session:
            api_key = await session.get(ApiKey, key_id)
            assert api_key is not None
            return api_key.usage_count

    return _get
