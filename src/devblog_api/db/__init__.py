"""Database package: async engine, SQLModel tables and repositories."""

from devblog_api.db.engine import close_db, get_session, init_db
from devblog_api.db.models import ApiKey, Post, PostStatus, PostTag, Profile


__all__ = [
    "ApiKey",
    "Post",
    "PostStatus",
    "PostTag",
    "Profile",
    "close_db",
    "get_session",
    "init_db",
]
