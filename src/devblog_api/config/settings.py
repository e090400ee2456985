"""Settings configuration for the DevBlog API server."""

import os
import tomllib
from pathlib import Path
from typing import Any

import orjson
from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from devblog_api.config.discovery import find_toml_config_file
from devblog_api.exceptions import ConfigurationError

from .cors import CORSSettings
from .database import DatabaseSettings
from .gate import GateSettings
from .server import ServerSettings


__all__ = [
    "CONFIG_OVERRIDES_ENV",
    "ConfigurationError",
    "Settings",
    "get_settings",
]


# JSON object applied over every other source; the CLI uses it to hand its
# options to uvicorn worker processes
CONFIG_OVERRIDES_ENV = "DEVBLOG_API_CONFIG_OVERRIDES"


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None -> default, dict -> instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    if hasattr(value, "model_dump"):
        return settings_class(**value.model_dump())
    return value


class ConfigOverridesSource(PydanticBaseSettingsSource):
    """Settings source reading the JSON object in `CONFIG_OVERRIDES_ENV`.

    Invalid JSON or a non-object value contributes nothing.
    """

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return self._load().get(field_name), field_name, False

    def _load(self) -> dict[str, Any]:
        overrides_json = os.environ.get(CONFIG_OVERRIDES_ENV)
        if not overrides_json:
            return {}
        try:
            overrides = orjson.loads(overrides_json)
        except orjson.JSONDecodeError:
            return {}
        return overrides if isinstance(overrides, dict) else {}

    def __call__(self) -> dict[str, Any]:
        return self._load()


class Settings(BaseSettings):
    """
    Configuration settings for the DevBlog API server.

    Sources, highest priority first: the JSON object in `CONFIG_OVERRIDES_ENV`,
    environment variables (nested keys use `__`, e.g. `GATE__DEFAULT_RATE_LIMIT`),
    `.env`, then the TOML file found by `find_toml_config_file` or named by
    `CONFIG_FILE`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings,
        description="Database configuration settings",
    )

    gate: GateSettings = Field(
        default_factory=GateSettings,
        description="API key gate configuration settings",
    )

    cors: CORSSettings = Field(
        default_factory=CORSSettings,
        description="CORS configuration settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file values arrive as init kwargs; the environment beats them
        # and CLI overrides beat everything
        return (
            ConfigOverridesSource(settings_cls),
            env_settings,
            dotenv_settings,
            init_settings,
            file_secret_settings,
        )

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: Any) -> Any:
        return _coerce_settings(v, ServerSettings)

    @field_validator("database", mode="before")
    @classmethod
    def validate_database(cls, v: Any) -> Any:
        return _coerce_settings(v, DatabaseSettings)

    @field_validator("gate", mode="before")
    @classmethod
    def validate_gate(cls, v: Any) -> Any:
        return _coerce_settings(v, GateSettings)

    @field_validator("cors", mode="before")
    @classmethod
    def validate_cors(cls, v: Any) -> Any:
        return _coerce_settings(v, CORSSettings)

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ValueError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(cls, config_path: Path | str | None = None) -> "Settings":
        """Create Settings instance from a configuration file.

        Args:
            config_path: Path to the TOML file. None means the `CONFIG_FILE`
                env var, then auto-discovery.

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            if config_path.suffix.lower() != ".toml":
                raise ValueError(
                    f"Unsupported config file format: {config_path.suffix}. "
                    "Only TOML (.toml) files are supported."
                )
            config_data = cls.load_toml_config(config_path)

        return cls(**config_data)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from the config file, environment and overrides env var.

    Raises:
        ConfigurationError: If the file cannot be read or a value is invalid
    """
    try:
        return Settings.from_config(config_path=config_path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Configuration error: {e}") from e
