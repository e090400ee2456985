"""API key manager - facade for key lifecycle operations."""

import shortuuid
from structlog import get_logger

from devblog_api.auth.api_keys.hashing import generate_secret, hash_key, make_preview
from devblog_api.auth.api_keys.models import APIKeyCreate
from devblog_api.config.gate import GateSettings
from devblog_api.db.models import ApiKey
from devblog_api.db.repositories import ApiKeyRepository
from devblog_api.exceptions import APIKeyNotFoundError


logger = get_logger(__name__)


class APIKeyManager:
    """Facade for issuing, rotating and revoking API keys.

    Plaintext secrets exist only in the return values of `create_key` and
    `regenerate_key`; the store keeps the digest and a short preview.
    """

    def __init__(
        self,
        repository: ApiKeyRepository | None = None,
        settings: GateSettings | None = None,
    ) -> None:
        self.repository = repository or ApiKeyRepository()
        self.settings = settings or GateSettings()

    def _new_secret(self) -> str:
        return generate_secret(self.settings.key_prefix)

    async def create_key(self, request: APIKeyCreate) -> tuple[ApiKey, str]:
        """Create a new API key.

        Returns:
            Tuple of (stored key, plaintext secret)
        """
        plaintext = self._new_secret()
        key_id = f"key_{shortuuid.uuid()[:12]}"
        rate_limit = request.rate_limit or self.settings.default_rate_limit

        api_key = await self.repository.create(
            key_id=key_id,
            user_id=request.user_id,
            name=request.name,
            key_hash=hash_key(plaintext),
            key_preview=make_preview(plaintext),
            rate_limit=rate_limit,
        )
        logger.info(
            "api_key_created",
            key_id=key_id,
            user_id=request.user_id,
            key_preview=api_key.key_preview,
            rate_limit=rate_limit,
        )
        return api_key, plaintext

    async def regenerate_key(self, key_id: str) -> tuple[ApiKey, str]:
        """Replace a key's secret; the old secret stops working immediately.

        Usage and last-used time are reset.

        Raises:
            APIKeyNotFoundError: If no key has this id
        """
        plaintext = self._new_secret()
        api_key = await self.repository.replace_secret(
            key_id, hash_key(plaintext), make_preview(plaintext)
        )
        if api_key is None:
            raise APIKeyNotFoundError(key_id)
        logger.info("api_key_regenerated", key_id=key_id, key_preview=api_key.key_preview)
        return api_key, plaintext

    async def set_active(self, key_id: str, active: bool) -> ApiKey:
        """Deactivate or reactivate a key without changing its secret.

        Raises:
            APIKeyNotFoundError: If no key has this id
        """
        api_key = await self.repository.set_active(key_id, active)
        if api_key is None:
            raise APIKeyNotFoundError(key_id)
        logger.info(
            "api_key_activated" if active else "api_key_deactivated", key_id=key_id
        )
        return api_key

    async def reset_usage(self, key_id: str) -> ApiKey:
        """Reset a key's usage counter to zero.

        Raises:
            APIKeyNotFoundError: If no key has this id
        """
        api_key = await self.repository.reset_usage(key_id)
        if api_key is None:
            raise APIKeyNotFoundError(key_id)
        logger.info("api_key_usage_reset", key_id=key_id)
        return api_key

    async def delete_key(self, key_id: str) -> bool:
        """Permanently delete a key.

        Returns:
            True if deleted, False if not found
        """
        deleted = await self.repository.delete(key_id)
        if deleted:
            logger.info("api_key_deleted", key_id=key_id)
        return deleted

    async def list_keys(self, user_id: str | None = None) -> list[ApiKey]:
        """List keys, optionally for a single owner."""
        return await self.repository.list_all(user_id)

    async def get_key(self, key_id: str) -> ApiKey | None:
        """Get a specific key by id."""
        return await self.repository.get(key_id)
