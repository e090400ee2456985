"""API key authentication and quota enforcement."""

from devblog_api.auth.api_keys.config import DEFAULT_GATED_ROUTES, GatedRoutesConfig
from devblog_api.auth.api_keys.gate import APIGate, extract_bearer_token
from devblog_api.auth.api_keys.manager import APIKeyManager
from devblog_api.auth.api_keys.models import (
    APIKeyCreate,
    APIKeyInfo,
    AuthResult,
    RateLimitDecision,
)
from devblog_api.auth.api_keys.quota import QuotaPolicy


__all__ = [
    "DEFAULT_GATED_ROUTES",
    "APIGate",
    "APIKeyCreate",
    "APIKeyInfo",
    "APIKeyManager",
    "AuthResult",
    "GatedRoutesConfig",
    "QuotaPolicy",
    "RateLimitDecision",
    "extract_bearer_token",
]
