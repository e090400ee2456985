"""Tests for API key secret generation and hashing."""

import hashlib
import re

from devblog_api.auth.api_keys.hashing import generate_secret, hash_key, make_preview


class TestGenerateSecret:
    def test_format(self) -> None:
        secret = generate_secret()
        assert re.fullmatch(r"ws_\d{13}_[0-9a-f]{64}", secret)

    def test_custom_prefix(self) -> None:
        assert generate_secret("test_").startswith("test_")

    def test_secrets_are_unique(self) -> None:
        assert len({generate_secret() for _ in range(50)}) == 50


class TestHashKey:
    def test_sha256_hex(self) -> None:
        assert hash_key("abc") == hashlib.sha256(b"abc").hexdigest()

    def test_deterministic(self) -> None:
        secret = generate_secret()
        assert hash_key(secret) == hash_key(secret)
        assert hash_key(secret) != hash_key(secret + "x")


def test_make_preview() -> None:
    secret = "ws_1700000000000_" + "a" * 60 + "beef"
    assert make_preview(secret) == "ws_17000...beef"
