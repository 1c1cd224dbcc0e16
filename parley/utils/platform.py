"""Per-platform locations for Parley's config file and local data."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def _user_dir(override_env: str, windows_env: str, xdg_env: str, xdg_default: Path) -> Path:
    override = os.environ.get(override_env)
    if override:
        return Path(override)

    if sys.platform == "win32":
        return Path(os.environ.get(windows_env, Path.home() / "AppData")) / "parley"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "parley"
    return Path(os.environ.get(xdg_env, xdg_default)) / "parley"


def get_config_dir() -> Path:
    """Directory searched for ``config.yaml`` when no path is given."""
    return _user_dir(
        "PARLEY_CONFIG_DIR", "APPDATA", "XDG_CONFIG_HOME", Path.home() / ".config"
    )


def get_data_dir() -> Path:
    """Default home of persistent vector collections."""
    return _user_dir(
        "PARLEY_DATA_DIR", "LOCALAPPDATA", "XDG_DATA_HOME", Path.home() / ".local" / "share"
    )
