from pathlib import Path

from devblog_api.core.system import get_config_dir


CONFIG_FILE_NAMES = (".devblog_api.toml", "devblog_api.toml")


def find_toml_config_file(cwd: Path | None = None) -> Path | None:
    """Find the TOML configuration file for devblog_api.

    Searches in the following order:
    1. .devblog_api.toml in the working directory
    2. devblog_api.toml in the working directory
    3. config.toml in the user config directory (platform-specific)
    """
    base = cwd or Path.cwd()
    candidates = [(base / name).resolve() for name in CONFIG_FILE_NAMES]
    candidates.append(get_config_dir() / "config.toml")

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    return None
