"""Models for API key management and gate decisions."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class APIKeyCreate(BaseModel):
    """Input model for creating a new API key."""

    user_id: str = Field(..., min_length=1, description="Owning profile id")
    name: str = Field(..., min_length=1, max_length=100, description="Key label")
    rate_limit: int | None = Field(
        default=None,
        ge=1,
        description="Request quota; the configured default when omitted",
    )


class APIKeyInfo(BaseModel):
    """Key metadata safe to display; never includes the secret or digest."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    key_preview: str
    is_active: bool
    rate_limit: int
    usage_count: int
    last_used_at: datetime | None = None
    created_at: datetime


@dataclass(frozen=True)
class RateLimitDecision:
    """Quota verdict for one request, derived from the stored counter."""

    usage_count: int
    rate_limit: int

    @property
    def allowed(self) -> bool:
        return self.usage_count < self.rate_limit

    @classmethod
    def evaluate(cls, usage_count: int, rate_limit: int) -> "RateLimitDecision":
        return cls(usage_count=usage_count, rate_limit=rate_limit)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful gate check."""

    user_id: str
    key_id: str
    rate_limit: int
    # counter value before this request was charged
    usage_before: int
    success: bool = True

    @property
    def used(self) -> int:
        return self.usage_before + 1

    @property
    def remaining(self) -> int:
        return max(0, self.rate_limit - self.usage_before - 1)
