"""Filesystem locations used by streamlauncher.

Follows the XDG conventions via platformdirs.
"""

from pathlib import Path

import platformdirs

APP_NAME = "streamlauncher"


def get_config_dir() -> Path:
    """Get the configuration directory."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_data_dir() -> Path:
    """Get the data directory (handoff file lives here)."""
    return Path(platformdirs.user_data_dir(APP_NAME))


def get_config_file(config_dir: Path | None = None) -> Path:
    """Get the path to config.yaml."""
    return (config_dir or get_config_dir()) / "config.yaml"


def get_handoff_file() -> Path:
    """Get the default path of the broadcast-identifier handoff file."""
    return get_data_dir() / "broadcast_id.txt"
