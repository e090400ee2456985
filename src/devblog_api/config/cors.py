"""CORS configuration settings."""

from pydantic import BaseModel, Field, field_validator, model_validator

from devblog_api.core.validators import parse_comma_separated


class CORSSettings(BaseModel):
    """CORS-specific configuration settings.

    When origins contains "*", credentials are forced off; browsers reject
    credentialed requests against a wildcard origin anyway.
    """

    origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="CORS allowed origins",
    )

    credentials: bool = Field(
        default=False,
        description="CORS allow credentials (disabled for wildcard origins)",
    )

    methods: list[str] = Field(
        default_factory=lambda: ["GET", "OPTIONS"],
        description="CORS allowed methods",
    )

    headers: list[str] = Field(
        default_factory=lambda: [
            "authorization",
            "x-client-info",
            "apikey",
            "content-type",
        ],
        description="CORS allowed headers",
    )

    expose_headers: list[str] = Field(
        default_factory=lambda: [
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Used",
            "Retry-After",
            "x-request-id",
        ],
        description="Response headers readable by browser clients",
    )

    max_age: int = Field(
        default=600,
        description="CORS preflight max age in seconds",
        ge=0,
    )

    @field_validator("origins", "headers", "expose_headers", mode="before")
    @classmethod
    def validate_lists(cls, v: str | list[str]) -> list[str]:
        """Accept comma-separated strings from env vars."""
        return parse_comma_separated(v)

    @field_validator("methods", mode="before")
    @classmethod
    def validate_cors_methods(cls, v: str | list[str]) -> list[str]:
        return [method.upper() for method in parse_comma_separated(v)]

    @model_validator(mode="after")
    def validate_wildcard_credentials(self) -> "CORSSettings":
        if "*" in self.origins and self.credentials:
            object.__setattr__(self, "credentials", False)
        return self
