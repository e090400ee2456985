"""Secret generation and digest helpers for API keys.

Keys are looked up by equality on their digest, so the digest is a plain
SHA-256 of the secret with no per-key salt.
"""

import hashlib
import secrets
import time


_RANDOM_BYTES = 32
_PREVIEW_HEAD = 8
_PREVIEW_TAIL = 4


def generate_secret(prefix: str = "ws_") -> str:
    """Generate a new plaintext secret: `<prefix><unix-ms>_<64 hex chars>`."""
    timestamp = int(time.time() * 1000)
    return f"{prefix}{timestamp}_{secrets.token_hex(_RANDOM_BYTES)}"


def hash_key(plaintext: str) -> str:
    """Hash a plaintext key using SHA-256.

    Args:
        plaintext: The plaintext API key

    Returns:
        SHA-256 hex digest
    """
    return hashlib.sha256(plaintext.encode()).hexdigest()


def make_preview(plaintext: str) -> str:
    """First 8 and last 4 characters, for display in listings."""
    return f"{plaintext[:_PREVIEW_HEAD]}...{plaintext[-_PREVIEW_TAIL:]}"
