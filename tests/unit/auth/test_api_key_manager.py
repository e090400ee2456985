"""Tests for API key manager."""

import re

import pytest

from devblog_api.auth.api_keys import APIKeyCreate, APIKeyManager
from devblog_api.auth.api_keys.hashing import hash_key
from devblog_api.config.gate import GateSettings
from devblog_api.db.repositories import ApiKeyRepository
from devblog_api.exceptions import APIKeyNotFoundError


class TestAPIKeyManager:
    """Tests for API key manager facade."""

    @pytest.fixture
    async def owner(self, make_profile):
        return await make_profile("grace")

    @pytest.fixture
    def manager(self, temp_db) -> APIKeyManager:
        return APIKeyManager(settings=GateSettings(default_rate_limit=500))

    async def test_create_key(self, manager: APIKeyManager, owner) -> None:
        key, token = await manager.create_key(APIKeyCreate(user_id=owner.id, name="ci"))

        assert re.fullmatch(r"ws_\d+_[0-9a-f]{64}", token)
        assert key.id.startswith("key_")
        assert key.user_id == owner.id
        assert key.key_hash == hash_key(token)
        assert key.key_preview == f"{token[:8]}...{token[-4:]}"
        assert key.rate_limit == 500
        assert key.usage_count == 0
        assert key.is_active is True
        assert key.last_used_at is None

    async def test_create_key_custom_rate_limit(
        self, manager: APIKeyManager, owner
    ) -> None:
        key, _ = await manager.create_key(
            APIKeyCreate(user_id=owner.id, name="ci", rate_limit=25)
        )
        assert key.rate_limit == 25

    async def test_plaintext_is_not_stored(self, manager: APIKeyManager, owner) -> None:
        key, token = await manager.create_key(APIKeyCreate(user_id=owner.id, name="ci"))
        stored = await manager.get_key(key.id)

        assert stored is not None
        assert token not in stored.model_dump().values()

    async def test_regenerate_key(
        self, manager: APIKeyManager, owner, set_usage
    ) -> None:
        key, old_token = await manager.create_key(
            APIKeyCreate(user_id=owner.id, name="ci")
        )
        await set_usage(key.id, 321)

        regenerated, new_token = await manager.regenerate_key(key.id)

        assert new_token != old_token
        assert regenerated.id == key.id
        assert regenerated.key_hash == hash_key(new_token)
        assert regenerated.usage_count == 0
        assert regenerated.last_used_at is None

        repo = ApiKeyRepository()
        assert await repo.get_active_by_hash(hash_key(old_token)) is None
        assert await repo.get_active_by_hash(hash_key(new_token)) is not None

    async def test_regenerate_unknown_key(self, manager: APIKeyManager) -> None:
        with pytest.raises(APIKeyNotFoundError):
            await manager.regenerate_key("key_missing")

    async def test_deactivate_and_reactivate(
        self, manager: APIKeyManager, owner
    ) -> None:
        key, token = await manager.create_key(APIKeyCreate(user_id=owner.id, name="ci"))
        repo = ApiKeyRepository()

        deactivated = await manager.set_active(key.id, False)
        assert deactivated.is_active is False
        assert await repo.get_active_by_hash(hash_key(token)) is None

        reactivated = await manager.set_active(key.id, True)
        assert reactivated.is_active is True
        assert await repo.get_active_by_hash(hash_key(token)) is not None

    async def test_set_active_unknown_key(self, manager: APIKeyManager) -> None:
        with pytest.raises(APIKeyNotFoundError):
            await manager.set_active("key_missing", False)

    async def test_reset_usage(self, manager: APIKeyManager, owner, set_usage) -> None:
        key, _ = await manager.create_key(APIKeyCreate(user_id=owner.id, name="ci"))
        await set_usage(key.id, 77)

        reset = await manager.reset_usage(key.id)

        assert reset.usage_count == 0

    async def test_delete_key(self, manager: APIKeyManager, owner) -> None:
        key, _ = await manager.create_key(APIKeyCreate(user_id=owner.id, name="ci"))

        assert await manager.delete_key(key.id) is True
        assert await manager.get_key(key.id) is None
        assert await manager.delete_key(key.id) is False

    async def test_list_keys(self, manager: APIKeyManager, owner, make_profile) -> None:
        other = await make_profile("linus")
        await manager.create_key(APIKeyCreate(user_id=owner.id, name="one"))
        await manager.create_key(APIKeyCreate(user_id=owner.id, name="two"))
        await manager.create_key(APIKeyCreate(user_id=other.id, name="three"))

        assert len(await manager.list_keys()) == 3
        owned = await manager.list_keys(owner.id)
        assert {key.name for key in owned} == {"one", "two"}
