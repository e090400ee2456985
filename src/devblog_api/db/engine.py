"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

# Register table models with SQLModel metadata before create_all
import devblog_api.db.models  # noqa: F401
from devblog_api.config.database import default_database_url


logger = structlog.get_logger(__name__)

# Global engine (initialized on startup)
_engine: AsyncEngine | None = None
_async_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_db_url(target: str | Path | None = None) -> str:
    """Resolve a database URL; a Path means a SQLite file."""
    if target is None:
        target = default_database_url()
    if isinstance(target, Path):
        target.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+aiosqlite:///{target}"

    url = make_url(target)
    if url.get_backend_name() == "sqlite" and url.database:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return target


async def init_db(target: str | Path | None = None, echo: bool = False) -> None:
    """Initialize the engine and create missing tables."""
    global _engine, _async_session_maker

    db_url = get_db_url(target)
    connect_args: dict[str, Any] = {}
    if make_url(db_url).get_backend_name() == "sqlite":
        # Writers queue on the database lock instead of failing immediately
        connect_args["timeout"] = 30

    if _engine is not None:
        await _engine.dispose()

    _engine = create_async_engine(db_url, echo=echo, connect_args=connect_args)
    _async_session_maker = async_sessionmaker(
        _engine, class_=AsyncSession, expire_on_commit=False
    )

    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.debug("database_initialized", backend=make_url(db_url).get_backend_name())


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _async_session_maker
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_maker = None


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get an async database session; commits on success, rolls back on error."""
    if _async_session_maker is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
