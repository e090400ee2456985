"""Service layer for devblog-api."""

from devblog_api.services.content import ContentService
from devblog_api.services.guard import DataStoreGuard


__all__ = ["ContentService", "DataStoreGuard"]
