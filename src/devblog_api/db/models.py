"""SQLModel database models."""

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class PostStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Profile(SQLModel, table=True):
    """Public author profile."""

    __tablename__ = "profiles"

    id: str = Field(default_factory=_uuid, primary_key=True)
    username: str = Field(index=True, unique=True)
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    social_links: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    created_at: datetime = Field(default_factory=_now)


class Post(SQLModel, table=True):
    """Blog post; only published posts are served by the API."""

    __tablename__ = "posts"
    __table_args__ = (UniqueConstraint("user_id", "slug"),)

    id: str = Field(default_factory=_uuid, primary_key=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    title: str
    slug: str = Field(index=True)
    excerpt: str | None = None
    markdown_content: str = ""
    html_content: str | None = None
    cover_image: str | None = None
    status: PostStatus = Field(default=PostStatus.DRAFT, index=True)
    view_count: int = Field(default=0)
    like_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=_now, index=True)
    updated_at: datetime = Field(default_factory=_now)


class PostTag(SQLModel, table=True):
    """One tag of one post."""

    __tablename__ = "post_tags"

    post_id: str = Field(foreign_key="posts.id", primary_key=True)
    tag: str = Field(primary_key=True, index=True)
    # order of the tag within the post's tag list
    position: int = Field(default=0)


class ApiKey(SQLModel, table=True):
    """Issued API credential.

    Only the SHA-256 digest of the secret is stored; `key_preview` keeps
    enough of it to recognise the key in listings.
    """

    __tablename__ = "api_keys"

    id: str = Field(primary_key=True)
    user_id: str = Field(foreign_key="profiles.id", index=True)
    name: str
    key_hash: str = Field(index=True, unique=True)
    key_preview: str
    is_active: bool = Field(default=True)
    rate_limit: int = Field(default=1000)
    usage_count: int = Field(default=0)
    usage_period_start: datetime | None = None
    last_used_at: datetime | None = None
    created_at: datetime = Field(default_factory=_now)
