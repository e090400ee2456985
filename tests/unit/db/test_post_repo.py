"""Tests for PostRepository queries."""

from datetime import UTC, datetime, timedelta

import pytest

from devblog_api.db.models import PostStatus
from devblog_api.db.repositories import PostRepository


BASE_TIME = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def repo(temp_db) -> PostRepository:
    return PostRepository()


@pytest.fixture
async def catalogue(make_profile, make_post):
    """Two authors, five published posts and a draft."""
    ada = await make_profile("ada")
    linus = await make_profile("linus")
    posts = {
        "engines": await make_post(
            ada, "engines", tags=["math", "history"], created_at=BASE_TIME
        ),
        "notes": await make_post(
            ada, "notes", tags=["math"], created_at=BASE_TIME + timedelta(hours=1)
        ),
        "kernels": await make_post(
            linus, "kernels", tags=["c", "linux"], created_at=BASE_TIME + timedelta(hours=2)
        ),
        "git": await make_post(
            linus, "git", tags=["linux"], created_at=BASE_TIME + timedelta(hours=3)
        ),
        "untagged": await make_post(
            linus, "untagged", created_at=BASE_TIME + timedelta(hours=4)
        ),
        "draft": await make_post(
            ada,
            "draft",
            tags=["math", "secret"],
            status=PostStatus.DRAFT,
            created_at=BASE_TIME + timedelta(hours=5),
        ),
    }
    return {"ada": ada, "linus": linus, "posts": posts}


class TestListPublished:
    async def test_newest_first_without_drafts(self, repo, catalogue) -> None:
        records, total = await repo.list_published(limit=10, offset=0)

        assert total == 5
        assert [r.post.slug for r in records] == [
            "untagged",
            "git",
            "kernels",
            "notes",
            "engines",
        ]

    async def test_pagination(self, repo, catalogue) -> None:
        records, total = await repo.list_published(limit=2, offset=2)

        assert total == 5
        assert [r.post.slug for r in records] == ["kernels", "notes"]

    async def test_offset_past_end(self, repo, catalogue) -> None:
        records, total = await repo.list_published(limit=10, offset=50)
        assert records == []
        assert total == 5

    async def test_tags_match_any(self, repo, catalogue) -> None:
        records, total = await repo.list_published(
            limit=10, offset=0, tags=["history", "c"]
        )

        assert total == 2
        assert {r.post.slug for r in records} == {"engines", "kernels"}

    async def test_author_filter(self, repo, catalogue) -> None:
        records, total = await repo.list_published(limit=10, offset=0, author="ada")

        assert total == 2
        assert all(r.author.username == "ada" for r in records)

    async def test_author_and_tags_combine(self, repo, catalogue) -> None:
        records, total = await repo.list_published(
            limit=10, offset=0, tags=["linux", "math"], author="linus"
        )
        assert total == 2
        assert {r.post.slug for r in records} == {"kernels", "git"}

    async def test_unknown_author_is_empty(self, repo, catalogue) -> None:
        records, total = await repo.list_published(limit=10, offset=0, author="nobody")
        assert records == []
        assert total == 0

    async def test_tags_keep_their_order(self, repo, catalogue) -> None:
        records, _ = await repo.list_published(limit=10, offset=0, author="ada")
        by_slug = {r.post.slug: r.tags for r in records}

        assert by_slug["engines"] == ["math", "history"]
        assert by_slug["notes"] == ["math"]

    async def test_untagged_post_has_empty_tags(self, repo, catalogue) -> None:
        records, _ = await repo.list_published(limit=1, offset=0)
        assert records[0].post.slug == "untagged"
        assert records[0].tags == []


class TestGetPublished:
    async def test_found(self, repo, catalogue) -> None:
        record = await repo.get_published("linus", "git")

        assert record is not None
        assert record.post.slug == "git"
        assert record.author.username == "linus"
        assert record.tags == ["linux"]

    async def test_wrong_author(self, repo, catalogue) -> None:
        assert await repo.get_published("ada", "git") is None

    async def test_draft_is_hidden(self, repo, catalogue) -> None:
        assert await repo.get_published("ada", "draft") is None


class TestTagCounts:
    async def test_counts_published_only(self, repo, catalogue) -> None:
        counts = await repo.tag_counts()

        assert counts == [("linux", 2), ("math", 2), ("c", 1), ("history", 1)]

    async def test_limit(self, repo, catalogue) -> None:
        assert await repo.tag_counts(limit=1) == [("linux", 2)]

    async def test_empty(self, repo) -> None:
        assert await repo.tag_counts() == []
