from pathlib import Path

import platformdirs


APP_DIR_NAME = "devblog_api"


def get_config_dir() -> Path:
    """Get the per-user configuration directory using platformdirs.

    Returns:
        Path to the devblog_api directory inside the user config directory.
    """
    return Path(platformdirs.user_config_dir()) / APP_DIR_NAME


def get_data_dir() -> Path:
    """Get the per-user data directory using platformdirs.

    Returns:
        Path to the devblog_api directory inside the user data directory.
    """
    return Path(platformdirs.user_data_dir()) / APP_DIR_NAME
