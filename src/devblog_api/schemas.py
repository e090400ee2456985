"""Response models for the public content API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from devblog_api.db.models import Profile
from devblog_api.db.repositories import PostRecord


class AuthorSummary(BaseModel):
    """Author fields embedded in every post."""

    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


class PostOut(BaseModel):
    """A published post as served by the API."""

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    markdown_content: str
    html_content: str | None = None
    cover_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    view_count: int
    like_count: int
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary

    @classmethod
    def from_record(cls, record: PostRecord) -> "PostOut":
        post = record.post
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            markdown_content=post.markdown_content,
            html_content=post.html_content,
            cover_image=post.cover_image,
            tags=record.tags,
            view_count=post.view_count,
            like_count=post.like_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author=AuthorSummary(
                username=record.author.username,
                display_name=record.author.display_name,
                avatar_url=record.author.avatar_url,
                bio=record.author.bio,
            ),
        )


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def build(cls, total: int, limit: int, offset: int) -> "Pagination":
        return cls(
            total=total, limit=limit, offset=offset, has_more=total > offset + limit
        )


class PostPage(BaseModel):
    """A page of posts plus pagination info."""

    data: list[PostOut]
    pagination: Pagination


class PostEnvelope(BaseModel):
    data: PostOut


class TagCount(BaseModel):
    name: str
    count: int


class TagList(BaseModel):
    data: list[TagCount]


class UserOut(BaseModel):
    """Public profile with statistics over the user's published posts."""

    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    social_links: dict[str, Any] | None = None
    created_at: datetime
    post_count: int
    total_views: int

    @classmethod
    def from_profile(
        cls, profile: Profile, post_count: int, total_views: int
    ) -> "UserOut":
        return cls(
            username=profile.username,
            display_name=profile.display_name,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            social_links=profile.social_links,
            created_at=profile.created_at,
            post_count=post_count,
            total_views=total_views,
        )


class UserEnvelope(BaseModel):
    data: UserOut


class HealthResponse(BaseModel):
    status: str
    version: str
