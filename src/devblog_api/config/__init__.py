"""Configuration module for the DevBlog API server."""

from .cors import CORSSettings
from .database import DatabaseSettings
from .discovery import find_toml_config_file
from .gate import GateSettings, QuotaWindow
from .server import ServerSettings
from .settings import CONFIG_OVERRIDES_ENV, Settings, get_settings


__all__ = [
    "CONFIG_OVERRIDES_ENV",
    "CORSSettings",
    "DatabaseSettings",
    "GateSettings",
    "QuotaWindow",
    "ServerSettings",
    "Settings",
    "find_toml_config_file",
    "get_settings",
]
