"""Server configuration settings."""

from pydantic import BaseModel, Field, field_validator

from devblog_api.core.validators import NonEmptyStr, Port


class ServerSettings(BaseModel):
    """HTTP server and logging configuration."""

    host: NonEmptyStr = Field(default="127.0.0.1", description="Interface to bind")
    port: Port = Field(default=8000, description="Port to bind")
    reload: bool = Field(default=False, description="Enable auto-reload")
    log_level: str = Field(default="INFO", description="Minimum log level")
    log_file: str | None = Field(
        default=None, description="Optional file receiving JSON log lines"
    )
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level
