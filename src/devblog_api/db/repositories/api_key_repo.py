"""API key repository for database operations."""

from datetime import UTC, datetime

from sqlalchemy import or_, update
from sqlmodel import col, select

from devblog_api.db.engine import get_session
from devblog_api.db.models import ApiKey


class ApiKeyRepository:
    """Repository for ApiKey operations.

    Counter mutations are single conditional UPDATE statements so concurrent
    requests against one key never lose an increment.
    """

    async def create(
        self,
        *,
        key_id: str,
        user_id: str,
        name: str,
        key_hash: str,
        key_preview: str,
        rate_limit: int,
    ) -> ApiKey:
        """Persist a new active key with a zero usage counter."""
        async with get_session() as session:
            api_key = ApiKey(
                id=key_id,
                user_id=user_id,
                name=name,
                key_hash=key_hash,
                key_preview=key_preview,
                rate_limit=rate_limit,
            )
            session.add(api_key)
            await session.commit()
            await session.refresh(api_key)
            return api_key

    async def get(self, key_id: str) -> ApiKey | None:
        """Get a key by id, active or not."""
        async with get_session() as session:
            result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
            return result.scalar_one_or_none()

    async def get_active_by_hash(self, key_hash: str) -> ApiKey | None:
        """Get the active key whose stored digest equals `key_hash`."""
        async with get_session() as session:
            result = await session.execute(
                select(ApiKey).where(
                    ApiKey.key_hash == key_hash,
                    ApiKey.is_active == True,  # noqa: E712
                )
            )
            return result.scalar_one_or_none()

    async def list_all(self, user_id: str | None = None) -> list[ApiKey]:
        """List keys, newest first, optionally for one owner."""
        async with get_session() as session:
            stmt = select(ApiKey).order_by(col(ApiKey.created_at).desc())
            if user_id is not None:
                stmt = stmt.where(ApiKey.user_id == user_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def consume(self, key_id: str) -> int | None:
        """Charge one request against the key.

        Returns the usage count after the increment, or None when the key is
        inactive, gone, or already at its limit (nothing is written then).
        """
        stmt = (
            update(ApiKey)
            .where(
                col(ApiKey.id) == key_id,
                col(ApiKey.is_active) == True,  # noqa: E712
                col(ApiKey.usage_count) < col(ApiKey.rate_limit),
            )
            .values(
                usage_count=col(ApiKey.usage_count) + 1,
                last_used_at=datetime.now(UTC),
            )
            .returning(col(ApiKey.usage_count))
            .execution_options(synchronize_session=False)
        )
        async with get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def start_usage_period(self, key_id: str, period_start: datetime) -> bool:
        """Zero the counter if it belongs to a period before `period_start`.

        Returns True if the counter was reset.
        """
        stmt = (
            update(ApiKey)
            .where(
                col(ApiKey.id) == key_id,
                or_(
                    col(ApiKey.usage_period_start).is_(None),
                    col(ApiKey.usage_period_start) < period_start,
                ),
            )
            .values(usage_count=0, usage_period_start=period_start)
            .execution_options(synchronize_session=False)
        )
        async with get_session() as session:
            result = await session.execute(stmt)
            return bool(result.rowcount)

    async def set_active(self, key_id: str, active: bool) -> ApiKey | None:
        """Activate or deactivate a key; the row and its hash are kept."""
        async with get_session() as session:
            result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
            api_key = result.scalar_one_or_none()
            if api_key:
                api_key.is_active = active
                session.add(api_key)
                await session.commit()
                await session.refresh(api_key)
            return api_key

    async def replace_secret(
        self, key_id: str, key_hash: str, key_preview: str
    ) -> ApiKey | None:
        """Swap in a new secret digest and restart usage from zero."""
        async with get_session() as session:
            result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
            api_key = result.scalar_one_or_none()
            if api_key:
                api_key.key_hash = key_hash
                api_key.key_preview = key_preview
                api_key.usage_count = 0
                api_key.usage_period_start = None
                api_key.last_used_at = None
                session.add(api_key)
                await session.commit()
                await session.refresh(api_key)
            return api_key

    async def reset_usage(self, key_id: str) -> ApiKey | None:
        """Set the usage counter back to zero."""
        async with get_session() as session:
            result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
            api_key = result.scalar_one_or_none()
            if api_key:
                api_key.usage_count = 0
                session.add(api_key)
                await session.commit()
                await session.refresh(api_key)
            return api_key

    async def delete(self, key_id: str) -> bool:
        """Delete a key. Returns True if deleted, False if not found."""
        async with get_session() as session:
            result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
            api_key = result.scalar_one_or_none()
            if api_key:
                await session.delete(api_key)
                await session.commit()
                return True
            return False
