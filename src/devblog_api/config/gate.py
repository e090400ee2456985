"""API gate configuration settings."""

from enum import StrEnum

from pydantic import BaseModel, Field

from devblog_api.core.validators import PositiveTimeout


class QuotaWindow(StrEnum):
    """How a key's usage counter relates to time."""

    # Counter only resets on regeneration or explicit reset
    FIXED = "fixed"
    # Counter resets at the start of every UTC calendar month
    CALENDAR_MONTH = "calendar_month"


class GateSettings(BaseModel):
    """Authentication and quota settings for the public API."""

    default_rate_limit: int = Field(
        default=1000, ge=1, description="Quota assigned to newly created keys"
    )
    retry_after_seconds: int = Field(
        default=3600,
        ge=1,
        description="retry_after hint returned with 429 in the fixed window",
    )
    quota_window: QuotaWindow = Field(
        default=QuotaWindow.FIXED, description="Quota period semantics"
    )
    max_concurrency: int = Field(
        default=64, ge=1, description="Maximum in-flight data store calls"
    )
    query_timeout_seconds: PositiveTimeout = Field(
        default=10.0, description="Time budget for a single data store call"
    )
    key_prefix: str = Field(
        default="ws_", min_length=1, description="Prefix of generated secrets"
    )
