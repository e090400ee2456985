"""Database configuration settings."""

from pydantic import BaseModel, Field

from devblog_api.core.system import get_data_dir


def default_database_url() -> str:
    """SQLite file in the per-user data directory."""
    return f"sqlite+aiosqlite:///{get_data_dir() / 'devblog.db'}"


class DatabaseSettings(BaseModel):
    """Async SQLAlchemy engine configuration."""

    url: str = Field(
        default_factory=default_database_url,
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
